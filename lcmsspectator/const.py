"""A collection of constants"""

PROTON = 1.00727646677
C13_MINUS_C12 = 1.0033548378
WATER_FORMULA = "H2O"

# Averagine residue, Senko et al. 1995
AVERAGINE_COMPOSITION = {
    "C": 4.9384,
    "H": 7.7583,
    "N": 1.3577,
    "O": 1.4773,
    "S": 0.0417,
}
AVERAGINE_MONOISOTOPIC_MASS = 111.0543052

MASS_ROUNDING_DIGITS = 3
SCORE_ROUNDING_DIGITS = 3
QVALUE_ROUNDING_DIGITS = 4

# MSPathFinder (IcTda) columns
IC_SCAN = "Scan"
IC_SEQUENCE = "Sequence"
IC_MODIFICATIONS = "Modifications"
IC_PROTEIN_NAME = "ProteinName"
IC_PROTEIN_DESC = "ProteinDesc"
IC_CHARGE = "Charge"
IC_SCORE = "IcScore"
IC_MATCHED_FRAGMENTS = "#MatchedFragments"
IC_QVALUE = "QValue"

# MS-GF+ columns
MSGF_SCORE = "MSGFScore"
MSGF_PROTEIN = "Protein"
MSGF_PEPTIDE = "Peptide"
MSGF_CHARGE = "Charge"
MSGF_QVALUE = "QValue"
MSGF_SPEC_EVALUE = "SpecEValue"
MSGFDB_SPEC_EVALUE = "MSGFDB_SpecEValue"
MSGF_SPEC_PROB = "MSGFSpecProb"
MSGF_SCAN_NUM = "ScanNum"
MSGF_SCAN = "Scan"

# Brute-force search columns
BRUTE_SCORE = "Score"
BRUTE_PROTEIN = "Protein"
BRUTE_DESCRIPTION = "Description"
BRUTE_SEQUENCE = "Sequence"
BRUTE_SCAN = "Scan"
BRUTE_MODIFICATIONS = "Modifications"

# PHRP synopsis and companion file columns
SYN_RESULT_ID = "ResultID"
SYN_SCAN = "Scan"
SYN_CHARGE = "Charge"
SYN_PEPTIDE = "Peptide"
SYN_PROTEIN = "Protein"
MOD_SUMMARY_SYMBOL = "Modification_Symbol"
MOD_SUMMARY_MASS = "Modification_Mass"
MOD_SUMMARY_RESIDUES = "Target_Residues"
MOD_SUMMARY_TYPE = "Modification_Type"
MOD_SUMMARY_TAG = "Mass_Correction_Tag"
MAP_RESULT_ID = "Result_ID"
MAP_UNIQUE_SEQ_ID = "Unique_Seq_ID"
MAP_PROTEIN_NAME = "Protein_Name"

# Feature file columns
FEATURE_ID = "FeatureID"
FEATURE_MONO_MASS = "MonoMass"
FEATURE_ABUNDANCE = "Abundance"
FEATURE_LIKELIHOOD_RATIO = "LikelihoodRatio"
FEATURE_PROBABILITY = "Probability"
FEATURE_ENVELOPE = "Envelope"
FEATURE_MIN_CHARGE = "MinCharge"
FEATURE_MAX_CHARGE = "MaxCharge"
FEATURE_MIN_SCAN = "MinScan"
FEATURE_MAX_SCAN = "MaxScan"
FEATURE_SUMMED_CORR = "SummedCorr"

# File naming conventions
SYNOPSIS_SUFFIX = "_syn.txt"
SYNOPSIS_MARKER = "_syn"
MOD_SUMMARY_SUFFIX = "_syn_ModSummary.txt"
RESULT_TO_SEQ_MAP_SUFFIX = "_syn_ResultToSeqMap.txt"
SEQ_TO_PROTEIN_MAP_SUFFIX = "_syn_SeqToProteinMap.txt"
IC_TSV_ARCHIVE_SUFFIX = "_IcTsv"
IC_TDA_ENTRY_SUFFIX = "_IcTda.tsv"
IC_TARGET_MARKER = "_ictarget"
IC_DECOY_MARKER = "_icdecoy"
