"""Rule matcher for applying a catalogue of named patterns to graphs.

Patterns are registered programmatically or loaded from YAML::

    patterns:
      - id: subject_verb_object
        pattern: "{arg1} <nsubj< {rel} >dobj> {arg2}"
        description: transitive clause
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from tqdm import tqdm

from .config import DEFAULT_MAX_MATCHES, DEFAULT_WORKERS, SPACY_MODEL
from .exceptions import DepmatchError
from .graph import Graph
from .pattern import CaptureEdgeMatcher, CaptureNodeMatcher, Match, Pattern, PatternCompiler
from .preprocessing import TextProcessor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleMatch:
    """A match together with the id of the pattern that produced it.

    Attributes
    ----------
    pattern_id : str
        ID of the matched pattern
    match : Match
        The match itself
    """

    pattern_id: str
    match: Match


class RuleMatcher:
    """Apply named patterns to dependency graphs.

    Parameters
    ----------
    compiler : Optional[PatternCompiler]
        Compiler for pattern text; defaults to one over ``Token`` attributes
    max_matches : Optional[int]
        Per-pattern, per-graph cap on the number of matches
    model_name : str
        spaCy model used by ``extract`` to parse raw text
    processor : Optional[TextProcessor]
        Already constructed text processor; skips loading ``model_name``
    """

    def __init__(
        self,
        compiler: Optional[PatternCompiler] = None,
        max_matches: Optional[int] = DEFAULT_MAX_MATCHES,
        model_name: str = SPACY_MODEL,
        processor: Optional[TextProcessor] = None,
    ):
        if max_matches is not None and max_matches < 0:
            raise ValueError(f"max_matches must be non-negative, got {max_matches}")
        self.compiler = compiler or PatternCompiler()
        self.max_matches = max_matches
        self.model_name = model_name
        self._processor = processor

        # Pattern metadata, in registration order
        self._patterns: Dict[str, Pattern] = {}
        self._pattern_info: Dict[str, Dict[str, Any]] = {}

    @property
    def pattern_ids(self) -> List[str]:
        return list(self._patterns)

    def get_pattern(self, pattern_id: str) -> Pattern:
        return self._patterns[pattern_id]

    def __len__(self) -> int:
        return len(self._patterns)

    def add_pattern(
        self,
        pattern_id: str,
        pattern: Union[str, Pattern],
        description: str = "",
    ) -> bool:
        """Add a single pattern.

        Parameters
        ----------
        pattern_id : str
            Unique pattern identifier
        pattern : Union[str, Pattern]
            A compiled pattern or pattern text
        description : str
            Free-form description

        Returns
        -------
        bool
            False if an equal pattern was already registered and this one was
            skipped

        Raises
        ------
        ValueError
            If ``pattern_id`` is already in use
        PatternSyntaxError
            If ``pattern`` is text that does not compile
        """
        if pattern_id in self._patterns:
            raise ValueError(f"Duplicate pattern id: {pattern_id}")

        if isinstance(pattern, str):
            pattern = self.compiler.compile(pattern)

        for existing_id, existing in self._patterns.items():
            if existing == pattern:
                logger.warning(
                    f"Pattern {pattern_id} duplicates {existing_id} ({pattern}); skipping"
                )
                return False

        self._patterns[pattern_id] = pattern
        self._pattern_info[pattern_id] = {
            "description": description,
            "pattern": str(pattern),
            "edges": len(pattern.edge_matchers),
        }
        return True

    def load_patterns(self, yaml_path: Union[str, Path]) -> int:
        """Load patterns from YAML configuration.

        Entries that are missing fields or fail to compile are logged and
        skipped.

        Parameters
        ----------
        yaml_path : Union[str, Path]
            Path to YAML config file

        Returns
        -------
        int
            Number of patterns loaded
        """
        with open(yaml_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        count = 0
        for i, entry in enumerate(config.get("patterns", [])):
            pattern_id = entry.get("id") if isinstance(entry, dict) else None
            text = entry.get("pattern") if isinstance(entry, dict) else None
            if not pattern_id or not text:
                logger.warning(f"Skipping entry {i} in {yaml_path}: needs 'id' and 'pattern'")
                continue

            try:
                added = self.add_pattern(pattern_id, text, entry.get("description", ""))
            except (DepmatchError, ValueError) as e:
                logger.warning(f"Failed to add pattern {pattern_id}: {e}")
                continue

            if added:
                count += 1

        logger.info(f"Loaded {count} patterns from {yaml_path}")
        return count

    def match(self, graph: Graph) -> List[RuleMatch]:
        """Find all pattern matches in a graph, patterns in registration order."""
        return [
            RuleMatch(pattern_id, m)
            for pattern_id, pattern in self._patterns.items()
            for m in pattern.search(graph, max_matches=self.max_matches)
        ]

    def match_many(
        self,
        graphs: Iterable[Graph],
        n_workers: int = DEFAULT_WORKERS,
        show_progress: bool = False,
    ) -> List[List[RuleMatch]]:
        """Match every graph, optionally across a thread pool.

        Results are returned in the order of ``graphs``.
        """
        graphs = list(graphs)
        if n_workers <= 1:
            return [self.match(g) for g in tqdm(graphs, desc="Matching", disable=not show_progress)]

        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            return list(tqdm(
                executor.map(self.match, graphs),
                total=len(graphs),
                desc="Matching",
                disable=not show_progress,
            ))

    def extract(self, text: str) -> List[List[RuleMatch]]:
        """Parse ``text`` with spaCy and match every sentence."""
        if self._processor is None:
            self._processor = TextProcessor(model_name=self.model_name)
        return [self.match(graph) for graph in self._processor.process(text)]

    def get_pattern_statistics(self) -> Dict[str, Any]:
        """Get statistics about loaded patterns."""
        edge_counts = [info["edges"] for info in self._pattern_info.values()]
        return {
            "total_patterns": len(self._patterns),
            "max_edges": max(edge_counts, default=0),
            "capturing_aliases": sorted({
                m.alias
                for pattern in self._patterns.values()
                for m in pattern.matchers
                if isinstance(m, (CaptureNodeMatcher, CaptureEdgeMatcher))
            }),
        }

    def explain_match(self, rule_match: RuleMatch) -> str:
        """Generate human-readable explanation of a match."""
        info = self._pattern_info.get(rule_match.pattern_id, {})
        match = rule_match.match

        explanation = [
            f"Pattern: {rule_match.pattern_id}",
            f"Text: {info.get('pattern', match.pattern)}",
        ]
        if info.get("description"):
            explanation.append(f"Description: {info['description']}")
        for alias, group in match.node_groups.items():
            explanation.append(f"Node {alias}: {getattr(group.node, 'string', group.node)}")
        for alias, group in match.edge_groups.items():
            explanation.append(f"Edge {alias}: {group.dedge}")
        explanation.append(f"Matched path: {match.bipath or '(single node)'}")

        return "\n".join(explanation)
