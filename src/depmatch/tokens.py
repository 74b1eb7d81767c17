"""Token payload used as the vertex type of dependency graphs."""

from dataclasses import dataclass, field
from typing import Optional

from .config import OUTSIDE_CHUNK


@dataclass(frozen=True)
class Token:
    """A lemmatized, chunked token of a sentence.

    Attributes
    ----------
    string : str
        Surface form of the token
    postag : str
        Part-of-speech tag
    chunk : str
        BIO chunk tag (e.g., "B-NP", "I-NP", "O")
    lemma : Optional[str]
        Lemma; defaults to the lower-cased surface form
    index : int
        Position of the token within its sentence. Tokens are compared by
        value, so two tokens with equal fields are the same graph vertex;
        give repeated words distinct indices when building tokens by hand
    """

    string: str
    postag: str
    chunk: str = OUTSIDE_CHUNK
    lemma: Optional[str] = field(default=None)
    index: int = 0

    def __post_init__(self):
        if self.lemma is None:
            object.__setattr__(self, "lemma", self.string.lower())

    def __str__(self) -> str:
        return f"{self.string}_{self.postag}_{self.index}"
