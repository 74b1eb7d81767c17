"""Text processing module using spaCy.

Turns parsed spaCy documents into dependency graphs over ``Token``s: one
vertex per token, one ``head -> dependent`` edge per non-root token labeled
with its dependency relation.
"""

import logging
import warnings
from typing import Dict, Iterable, List, Optional, Union

import spacy
from spacy.language import Language
from spacy.tokens import Doc, Span

from ..config import OUTSIDE_CHUNK, SPACY_MODEL
from ..graph import Edge, Graph
from ..tokens import Token

logger = logging.getLogger(__name__)


def chunk_tags(doc: Union[Doc, Span]) -> Dict[int, str]:
    """BIO noun-chunk tags keyed by token index (``B-NP``, ``I-NP``).

    Tokens outside every chunk are absent. Languages without a noun chunker
    yield an empty mapping.
    """
    try:
        chunks = list(doc.noun_chunks)
    except (NotImplementedError, ValueError) as e:
        logger.debug("No noun chunks available: %s", e)
        return {}

    tags = {}
    for chunk in chunks:
        for token in chunk:
            tags[token.i] = "B-NP" if token.i == chunk.start else "I-NP"
    return tags


def doc_to_graph(doc: Union[Doc, Span]) -> Graph[Token]:
    """Convert a parsed document or sentence span into a dependency graph.

    Token indices are relative to the start of ``doc``. Heads outside a
    sentence span are ignored.
    """
    offset = doc.start if isinstance(doc, Span) else 0
    chunks = chunk_tags(doc)

    tokens = {
        t.i: Token(
            string=t.text,
            postag=t.tag_ or t.pos_,
            chunk=chunks.get(t.i, OUTSIDE_CHUNK),
            lemma=t.lemma_ or None,
            index=t.i - offset,
        )
        for t in doc
    }
    edges = [
        Edge(tokens[t.head.i], tokens[t.i], t.dep_)
        for t in doc
        if t.head.i != t.i and t.head.i in tokens
    ]
    return Graph(tokens.values(), edges)


class TextProcessor:
    """Parse text with spaCy into dependency graphs.

    Parameters
    ----------
    model_name : str
        spaCy model to load
    nlp : Optional[Language]
        An already loaded pipeline; takes precedence over ``model_name``
    """

    def __init__(self, model_name: str = SPACY_MODEL, nlp: Optional[Language] = None):
        if nlp is not None:
            self.nlp = nlp
            return
        try:
            self.nlp = spacy.load(model_name)
        except OSError:
            warnings.warn(f"Model {model_name} not found. Run: python -m spacy download {model_name}")
            raise

    def parse(self, text: str) -> Doc:
        return self.nlp(text)

    def process(self, text: str) -> List[Graph[Token]]:
        """Parse ``text`` and return one graph per sentence."""
        return [doc_to_graph(sent) for sent in self.parse(text).sents]

    def process_batch(self, texts: Iterable[str], batch_size: int = 32) -> List[Graph[Token]]:
        """Parse many texts efficiently using spaCy's pipe; sentences are flattened."""
        graphs = []
        for doc in self.nlp.pipe(texts, batch_size=batch_size):
            graphs.extend(doc_to_graph(sent) for sent in doc.sents)
        logger.info("Parsed %d sentence(s)", len(graphs))
        return graphs
