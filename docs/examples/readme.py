from lcmsspectator import IdentificationTree, create_reader, read_fasta

# Pick a reader for an identification file
reader = create_reader("examples/QC_Shew_IcTda.tsv")
print(reader)

# Read every identification, skipping oxidized matches
prsms = reader.read(mod_ignore_list=["Oxidation"])
print(len(prsms))

# Inspect a single match
prsm = prsms[0]
print(f"Scan={prsm.scan}; Sequence={prsm.sequence}; Mass={prsm.mass:.4f}; m/z={prsm.precursor_mz:.4f}")
print(prsm.modification_locations)

# Group matches by protein and attach descriptions from the search database
tree = IdentificationTree(prsms)
tree.add_fasta_entries(read_fasta("examples/QC_Shew.fasta"))
for protein in tree.proteins.values():
    print(f"{protein.protein_name}: {len(protein.proteoforms)} proteoforms, {len(protein)} matches")

print(tree.get_highest_scoring_prsm())
