"""Tests for the backtracking search."""

import pytest

from depmatch import (
    CaptureNodeMatcher,
    DirectedEdge,
    DirectedEdgeMatcher,
    Direction,
    Edge,
    ExpressionNodeMatcher,
    Graph,
    GraphError,
    LabelEdgeMatcher,
    Pattern,
    Token,
    TrivialNodeMatcher,
    compile_pattern,
)

SVO = "{arg1}<nsubj<{rel}>dobj>{arg2}"


def captured(match):
    """Alias -> captured node string, for comparing matches."""
    return {alias: group.node.string for alias, group in match.node_groups.items()}


def summary(matches):
    """Captured node and edge labels of each match, ignoring path bookkeeping."""
    return sorted(
        (
            tuple(sorted((a, g.node.index) for a, g in m.node_groups.items())),
            tuple(sorted((a, g.dedge.label) for a, g in m.edge_groups.items())),
        )
        for m in matches
    )


# ==============================================================================
# Scenarios
# ==============================================================================


class TestScenarios:

    def test_subject_verb_object(self, speech):
        matches = compile_pattern(SVO).search(speech.graph, speech.obama)
        assert len(matches) == 1
        assert captured(matches[0]) == {"arg1": "Obama", "rel": "gave", "arg2": "speech"}
        assert matches[0].edges == (
            DirectedEdge.up(speech.nsubj),
            DirectedEdge.down(speech.dobj),
        )

    def test_subject_verb_object_anchored_at_verb(self, speech):
        # {arg1} binds the anchor itself, and gave has no head to climb to
        assert compile_pattern(SVO).search(speech.graph, speech.gave) == []

    def test_subject_verb_object_whole_graph(self, speech):
        matches = compile_pattern(SVO).search(speech.graph)
        assert len(matches) == 1
        assert captured(matches[0]) == {"arg1": "Obama", "rel": "gave", "arg2": "speech"}

    def test_missing_edge_label(self, speech):
        pattern = compile_pattern("{rel}>iobj>{arg2}")
        assert pattern.search(speech.graph, speech.gave) == []

    def test_parallel_edges_branch(self, two_subjects):
        matches = compile_pattern("{rel}>nsubj>{arg1}").search(two_subjects.graph, two_subjects.gave)
        assert [captured(m) for m in matches] == [
            {"rel": "gave", "arg1": "Obama"},
            {"rel": "gave", "arg1": "Biden"},
        ]

    def test_reflection_from_the_other_end(self, speech):
        pattern = compile_pattern(SVO)
        forward = pattern.search(speech.graph, speech.obama)
        backward = pattern.reflection().search(speech.graph, speech.speech)
        assert len(backward) == 1
        assert captured(backward[0]) == captured(forward[0])
        assert backward[0].bipath == forward[0].bipath.reversed()


# ==============================================================================
# Invariants
# ==============================================================================


class TestEdgeReuse:

    def test_cannot_walk_back_over_the_same_edge(self, speech):
        pattern = compile_pattern("{a} >nsubj> {b} <nsubj< {c}")
        assert pattern.search(speech.graph) == []

    def test_other_parallel_edge_is_still_available(self, two_subjects):
        pattern = compile_pattern("{x} <nsubj< {head} >nsubj> {y}")
        matches = pattern.search(two_subjects.graph, two_subjects.obama)
        assert [captured(m) for m in matches] == [{"x": "Obama", "head": "gave", "y": "Biden"}]

    def test_no_edge_used_twice_in_any_match(self, two_subjects):
        pattern = compile_pattern(".* -.*- .* -.*- .* -.*- .*")
        for match in pattern.search(two_subjects.graph):
            underlying = [e.edge for e in match.edges]
            assert len(underlying) == len(set(underlying))

    def test_walk_may_revisit_a_vertex(self):
        a, b, c = Token("a", "X", index=0), Token("b", "X", index=1), Token("c", "X", index=2)
        graph = Graph([a, b, c], [Edge(a, b, "x"), Edge(b, c, "y"), Edge(c, a, "z")])
        pattern = compile_pattern("{start} >x> .* >y> .* >z> {end}")
        matches = pattern.search(graph, a)
        assert len(matches) == 1
        assert matches[0].node("start") == matches[0].node("end") == a


class TestCaptures:

    def test_no_captures_means_empty_maps(self, speech):
        matches = compile_pattern(".* <nsubj< .* >dobj> .*").search(speech.graph)
        assert len(matches) == 1
        assert dict(matches[0].node_groups) == {}
        assert dict(matches[0].edge_groups) == {}

    def test_every_match_has_every_alias(self, two_subjects):
        matches = compile_pattern("{h} >{e:nsubj}> {d}").search(two_subjects.graph)
        assert len(matches) == 2
        for match in matches:
            assert set(match.node_groups) == {"h", "d"}
            assert set(match.edge_groups) == {"e"}
            assert match.edge_groups["e"].text == "nsubj"

    def test_node_capture_text(self, speech):
        match = compile_pattern('{rel:lemma="give"}').search(speech.graph)[0]
        assert match.node_groups["rel"].text == 'lemma="give"'
        assert match.node("rel") == speech.gave
        assert match.node("missing") is None

    def test_edge_capture_records_direction(self, speech):
        match = compile_pattern("{a} <{e:nsubj}< {b}").search(speech.graph)[0]
        assert match.edge("e") == DirectedEdge.up(speech.nsubj)

    def test_capture_maps_are_read_only(self, speech):
        match = compile_pattern("{a}").search(speech.graph)[0]
        with pytest.raises(TypeError):
            match.node_groups["b"] = None

    def test_branches_do_not_share_captures(self, two_subjects):
        matches = compile_pattern("{rel} >{e:nsubj}> {arg1}").search(two_subjects.graph)
        assert [m.node("arg1") for m in matches] == [two_subjects.obama, two_subjects.biden]
        assert [m.edge("e").end for m in matches] == [two_subjects.obama, two_subjects.biden]


class TestReflectionInvolution:

    @pytest.mark.parametrize("text", [
        SVO,
        "{a} -.*- {b}",
        "{h} >{e:/nsubj|dobj/}> {d}",
        '{v:pos="VBD"} >.*> {x} <.*< {y}',
    ])
    def test_reflecting_twice_finds_the_same_matches(self, speech, text):
        pattern = compile_pattern(text)
        twice = pattern.reflection().reflection()
        assert summary(pattern.search(speech.graph)) == summary(twice.search(speech.graph))

    @pytest.mark.parametrize("text", [SVO, "{h} >{e:nsubj}> {d}", "{x} <nsubj< {head} >nsubj> {y}"])
    def test_whole_graph_search_is_direction_independent(self, two_subjects, speech, text):
        pattern = compile_pattern(text)
        for graph in (speech.graph, two_subjects.graph):
            assert summary(pattern.search(graph)) == summary(pattern.reflection().search(graph))


class TestSearchEntryPoints:

    def test_whole_graph_follows_vertex_order(self, speech):
        matches = Pattern([TrivialNodeMatcher()]).search(speech.graph)
        assert [m.bipath.edges for m in matches] == [(), (), ()]
        matches = compile_pattern("{v}").search(speech.graph)
        assert [m.node("v") for m in matches] == list(speech.graph.vertices)

    def test_call_is_search(self, speech):
        pattern = compile_pattern(SVO)
        assert pattern(speech.graph) == pattern.search(speech.graph)

    def test_max_matches(self, two_subjects):
        pattern = compile_pattern("{rel}>nsubj>{arg1}")
        matches = pattern.search(two_subjects.graph, max_matches=1)
        assert [m.node("arg1") for m in matches] == [two_subjects.obama]

    def test_iter_matches_is_lazy(self, two_subjects):
        found = compile_pattern("{rel}>nsubj>{arg1}").iter_matches(two_subjects.graph)
        assert next(found).node("arg1") == two_subjects.obama

    def test_unknown_anchor(self, speech):
        with pytest.raises(GraphError):
            compile_pattern("{a}").search(speech.graph, Token("nobody", "NN"))

    def test_match_remembers_pattern(self, speech):
        pattern = compile_pattern(SVO)
        assert pattern.search(speech.graph)[0].pattern is pattern

    def test_search_does_not_mutate_inputs(self, speech):
        pattern = compile_pattern(SVO)
        before = (speech.graph.vertices, speech.graph.edges, pattern.matchers)
        pattern.search(speech.graph)
        pattern.reflection().search(speech.graph)
        assert (speech.graph.vertices, speech.graph.edges, pattern.matchers) == before

    def test_negative_max_matches(self, speech):
        with pytest.raises(ValueError, match="non-negative"):
            compile_pattern(SVO).search(speech.graph, max_matches=-1)


class TestNodeEvaluation:

    @staticmethod
    def counting_matcher(calls):
        return ExpressionNodeMatcher("counted", lambda token: calls.append(token) or True)

    def test_predicate_runs_once_per_anchor(self, speech):
        calls = []
        Pattern([self.counting_matcher(calls)]).search(speech.graph, speech.gave)
        assert calls == [speech.gave]

    def test_capture_does_not_rerun_predicate(self, speech):
        calls = []
        pattern = Pattern([CaptureNodeMatcher("x", self.counting_matcher(calls))])
        assert pattern.search(speech.graph, speech.gave)[0].node("x") == speech.gave
        assert calls == [speech.gave]

    def test_whole_graph_visits_each_vertex_once(self, speech):
        calls = []
        Pattern([self.counting_matcher(calls)]).search(speech.graph)
        assert calls == list(speech.graph.vertices)

    def test_branches_share_the_evaluation(self, two_subjects):
        calls = []
        pattern = Pattern([
            self.counting_matcher(calls),
            DirectedEdgeMatcher(Direction.DOWN, LabelEdgeMatcher("nsubj")),
            TrivialNodeMatcher(),
        ])
        assert len(pattern.search(two_subjects.graph, two_subjects.gave)) == 2
        assert calls == [two_subjects.gave]
