"""Example script to write out the first n identifications from a result file"""
import click

from lcmsspectator.readers import FormatInferenceFailure, load_identifications, sniff_format
from lcmsspectator.prsm import sort_by_score


@click.command('first_n_identifications')
@click.argument('inpath', type=click.Path(exists=True))
@click.option("-n", '--identifications-to-show', type=int, default=20)
@click.option("-x", "--ignore-modification", "ignored", multiple=True,
              help="Skip identifications carrying this modification")
def main(inpath, identifications_to_show: int=20, ignored=()):
    """Read identifications from the input file and write the best `n` to STDOUT as a table"""
    click.echo(f"Opening {inpath} as {sniff_format(inpath)}", err=True)
    try:
        prsms = load_identifications(inpath, mod_ignore_list=ignored)
    except FormatInferenceFailure as err:
        click.echo(f"{err}", err=True)
        raise click.Abort()

    stream = click.get_text_stream('stdout')
    stream.write("Scan\tCharge\tSequence\tProtein\tScore\tQValue\tPrecursorMz\n")
    for i, prsm in enumerate(sort_by_score(prsms), 1):
        if i > identifications_to_show:
            break
        stream.write(
            f"{prsm.scan}\t{prsm.charge}\t{prsm.sequence}\t{prsm.protein_name}\t"
            f"{prsm.score}\t{prsm.q_value}\t{prsm.precursor_mz:.4f}\n")


if __name__ == "__main__":
    main.main()
