"""Tests for lcmsspectator.readers.mzidentml."""
import gzip

import pytest

from lcmsspectator.readers import MzIdentMlOptions, MzIdentMlReader

MZID = """<?xml version="1.0" encoding="UTF-8"?>
<MzIdentML id="test" version="1.1.0" xmlns="http://psidev.info/psi/pi/mzIdentML/1.1">
  <SequenceCollection>
    <DBSequence id="DBSeq1" accession="ProtA" searchDatabase_ref="SDB_1">
      <cvParam cvRef="PSI-MS" accession="MS:1001088" name="protein description" value="Kinase"/>
    </DBSequence>
    <DBSequence id="DBSeq2" accession="ProtB" searchDatabase_ref="SDB_1"/>
    <Peptide id="Pep1">
      <PeptideSequence>PEPMTIDE</PeptideSequence>
      <Modification location="4" monoisotopicMassDelta="15.994915">
        <cvParam cvRef="UNIMOD" accession="UNIMOD:35" name="Oxidation"/>
      </Modification>
    </Peptide>
    <Peptide id="Pep2">
      <PeptideSequence>PEPTIDE</PeptideSequence>
    </Peptide>
    <PeptideEvidence id="PE1" dBSequence_ref="DBSeq1" peptide_ref="Pep1" pre="K" post="R" isDecoy="false"/>
    <PeptideEvidence id="PE2" dBSequence_ref="DBSeq2" peptide_ref="Pep1" pre="R" post="A" isDecoy="false"/>
    <PeptideEvidence id="PE3" dBSequence_ref="DBSeq2" peptide_ref="Pep2" pre="-" post="-" isDecoy="false"/>
  </SequenceCollection>
  <DataCollection>
    <AnalysisData>
      <SpectrumIdentificationList id="SIL_1">
        <SpectrumIdentificationResult id="SIR_1" spectrumID="controllerType=0 controllerNumber=1 scan=1234" spectraData_ref="SD_1">
          <SpectrumIdentificationItem id="SII_1_1" chargeState="2" experimentalMassToCharge="467.7" calculatedMassToCharge="467.7" peptide_ref="Pep1" rank="1" passThreshold="true">
            <PeptideEvidenceRef peptideEvidence_ref="PE1"/>
            <PeptideEvidenceRef peptideEvidence_ref="PE2"/>
            <cvParam cvRef="PSI-MS" accession="MS:1002052" name="MS-GF:SpecEValue" value="1.5E-12"/>
            <cvParam cvRef="PSI-MS" accession="MS:1002054" name="MS-GF:QValue" value="0.001"/>
          </SpectrumIdentificationItem>
        </SpectrumIdentificationResult>
        <SpectrumIdentificationResult id="SIR_2" spectrumID="index=9" spectraData_ref="SD_1">
          <SpectrumIdentificationItem id="SII_2_1" chargeState="1" experimentalMassToCharge="800.4" calculatedMassToCharge="800.4" peptide_ref="Pep2" rank="1" passThreshold="true">
            <PeptideEvidenceRef peptideEvidence_ref="PE3"/>
            <cvParam cvRef="PSI-MS" accession="MS:1002052" name="MS-GF:SpecEValue" value="0.5"/>
            <cvParam cvRef="PSI-MS" accession="MS:1002054" name="MS-GF:QValue" value="0.3"/>
          </SpectrumIdentificationItem>
          <cvParam cvRef="PSI-MS" accession="MS:1001115" name="scan number(s)" value="2000"/>
        </SpectrumIdentificationResult>
      </SpectrumIdentificationList>
    </AnalysisData>
  </DataCollection>
</MzIdentML>
"""


@pytest.fixture
def mzid_path(tmp_path):
    path = tmp_path / "Dataset.mzid"
    path.write_text(MZID, encoding="utf8")
    return path


class TestMzIdentMlReader:
    def test_read(self, mzid_path, registry):
        prsms = MzIdentMlReader(mzid_path, modification_registry=registry).read()
        assert len(prsms) == 3
        first, second, third = prsms
        assert (first.protein_name, first.protein_desc) == ("ProtA", "Kinase")
        assert second.protein_name == "ProtB"
        assert first.scan == second.scan == 1234
        assert first.charge == 2
        assert first.sequence_text == "PEPM+15.995TIDE"
        assert str(first.sequence) == "PEPM[Oxidation]TIDE"
        assert first.score == pytest.approx(1.5e-12)
        assert first.q_value == pytest.approx(0.001)
        assert first.use_golf_scoring
        assert third.scan == 2000
        assert third.sequence_text == "PEPTIDE"

    def test_gzipped(self, tmp_path, registry):
        path = tmp_path / "Dataset.mzid.gz"
        with gzip.open(path, "wt", encoding="utf8") as stream:
            stream.write(MZID)
        assert len(MzIdentMlReader(path, modification_registry=registry).read()) == 3

    def test_thresholds(self, mzid_path, registry):
        reader = MzIdentMlReader(mzid_path, modification_registry=registry,
                                 options=MzIdentMlOptions(max_q_value=0.01))
        assert {p.scan for p in reader.read()} == {1234}

    def test_ignore_list(self, mzid_path, registry):
        prsms = MzIdentMlReader(mzid_path, modification_registry=registry).read(mod_ignore_list=["Oxidation"])
        assert [p.scan for p in prsms] == [2000]

    def test_progress_completes(self, mzid_path, registry):
        reported = []
        MzIdentMlReader(mzid_path, modification_registry=registry).read(progress=reported.append)
        assert reported == [100.0]
