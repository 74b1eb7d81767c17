"""Format converter module for reading and writing dependency graphs as CoNLL-U."""

import logging
from pathlib import Path
from typing import Dict, List, Union

from conllu import TokenList, parse

from ..config import CONLLU_CHUNK_KEY, CONLLU_POS_FIELD, OUTSIDE_CHUNK
from ..graph import Edge, Graph
from ..tokens import Token

logger = logging.getLogger(__name__)


class FormatConverter:
    """Convert between CoNLL-U sentences and ``Graph[Token]``.

    Parameters
    ----------
    pos_field : str
        CoNLL-U column used as the token's POS tag ("upos" or "xpos");
        the other column is used when the preferred one is empty
    chunk_key : str
        MISC key holding the token's BIO chunk tag
    """

    def __init__(self, pos_field: str = CONLLU_POS_FIELD, chunk_key: str = CONLLU_CHUNK_KEY):
        if pos_field not in ("upos", "xpos"):
            raise ValueError(f"pos_field must be 'upos' or 'xpos', got {pos_field!r}")
        self.pos_field = pos_field
        self.fallback_pos_field = "xpos" if pos_field == "upos" else "upos"
        self.chunk_key = chunk_key

    def sentence_to_graph(self, sentence: TokenList) -> Graph[Token]:
        """Convert one parsed CoNLL-U sentence into a dependency graph.

        Multiword-token ranges and empty nodes are skipped; a head of 0 marks
        the root, which gets no incoming edge.
        """
        rows = [row for row in sentence if isinstance(row["id"], int)]

        tokens: Dict[int, Token] = {}
        for row in rows:
            misc = row.get("misc") or {}
            tokens[row["id"]] = Token(
                string=row["form"],
                postag=row.get(self.pos_field) or row.get(self.fallback_pos_field) or "_",
                chunk=misc.get(self.chunk_key) or OUTSIDE_CHUNK,
                lemma=row.get("lemma") if row.get("lemma") not in (None, "_") else None,
                index=row["id"] - 1,
            )

        edges = []
        for row in rows:
            head = row.get("head")
            if not head:
                continue
            if head not in tokens:
                logger.warning(
                    f"Skipping edge from unknown head {head} to token {row['id']} "
                    f"in sentence {sentence.metadata.get('sent_id', '?')}"
                )
                continue
            edges.append(Edge(tokens[head], tokens[row["id"]], row.get("deprel") or "dep"))

        return Graph(tokens.values(), edges)

    def parse_conllu(self, text: str) -> List[Graph[Token]]:
        """Parse CoNLL-U text into one graph per sentence."""
        return [self.sentence_to_graph(sentence) for sentence in parse(text)]

    def load_conllu(self, file_path: Union[str, Path]) -> List[Graph[Token]]:
        """Load and parse a CoNLL-U file.

        Parameters
        ----------
        file_path : Union[str, Path]
            Path to the CoNLL-U file

        Returns
        -------
        List[Graph[Token]]
            One graph per sentence
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                graphs = self.parse_conllu(f.read())
        except Exception as e:
            logger.error(f"[ERROR] CoNLL-U load ERROR: {type(e).__name__}: {e}")
            logger.error(f"   File: {file_path}")
            raise

        logger.info(f"Loaded {len(graphs)} sentence(s) from {file_path}")
        return graphs

    def graph_to_tokenlist(self, graph: Graph[Token]) -> TokenList:
        """Convert a dependency graph back into a CoNLL-U TokenList."""
        ordered = sorted(graph.vertices, key=lambda t: t.index)
        ids = {token: i + 1 for i, token in enumerate(ordered)}

        heads = {}
        for edge in graph.edges:
            heads[edge.dest] = (ids[edge.source], edge.label)

        rows = []
        for token in ordered:
            head, deprel = heads.get(token, (0, "root"))
            rows.append({
                "id": ids[token],
                "form": token.string,
                "lemma": token.lemma,
                "upos": token.postag if self.pos_field == "upos" else "_",
                "xpos": token.postag if self.pos_field == "xpos" else "_",
                "feats": None,
                "head": head,
                "deprel": deprel,
                "deps": None,
                "misc": {self.chunk_key: token.chunk} if token.chunk != OUTSIDE_CHUNK else None,
            })

        text = " ".join(token.string for token in ordered)
        return TokenList(rows, metadata={"text": text})

    def to_conllu(self, graphs: List[Graph[Token]], output_path: Union[str, Path]) -> None:
        """Write dependency graphs to a CoNLL-U file."""
        with open(output_path, "w", encoding="utf-8") as f:
            for graph in graphs:
                f.write(self.graph_to_tokenlist(graph).serialize())

        logger.info(f"Wrote {len(graphs)} sentence(s) to {output_path}")
