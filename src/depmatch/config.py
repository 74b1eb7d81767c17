"""Configuration for the dependency pattern engine."""

# spaCy configuration
SPACY_MODEL = "en_core_web_sm"

# Matched text reported by the wildcard node matcher
TRIVIAL_NODE_TEXT = ".*"

# Chunk tag for tokens outside any noun chunk
OUTSIDE_CHUNK = "O"

# Token attributes compared without regard to case by the pattern compiler
CASE_INSENSITIVE_ATTRIBUTES = ("string", "lemma")

# CoNLL-U reading
CONLLU_POS_FIELD = "upos"  # "upos" or "xpos"
CONLLU_CHUNK_KEY = "Chunk"  # MISC key holding a BIO chunk tag

# Search bounds (None = unbounded)
DEFAULT_MAX_MATCHES = None

# Threads used by RuleMatcher.match_many
DEFAULT_WORKERS = 1
