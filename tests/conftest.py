import pytest

from lcmsspectator.modification import COMMON_MODIFICATIONS, ModificationRegistry


@pytest.fixture
def registry():
    return ModificationRegistry(COMMON_MODIFICATIONS)


@pytest.fixture
def write_table(tmp_path):
    def _write(name, rows, delimiter="\t"):
        path = tmp_path / name
        path.write_text("\n".join(delimiter.join(map(str, row)) for row in rows) + "\n", encoding="utf8")
        return path
    return _write


@pytest.fixture
def unimod_registry():
    from lcmsspectator.ontology import UnimodResolver

    def loader():
        return {
            "Bromo": {"xref": ['record_id "340"', 'delta_mono_mass "77.910511"']},
        }
    return ModificationRegistry(COMMON_MODIFICATIONS, resolver=UnimodResolver(loader=loader))
