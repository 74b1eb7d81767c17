"""Tests for graphs, directed edges and bipaths."""

import pytest

from depmatch import Bipath, DirectedEdge, Direction, Edge, Graph, GraphError, Token


class TestDirection:

    def test_flip(self):
        assert Direction.UP.flip() is Direction.DOWN
        assert Direction.DOWN.flip() is Direction.UP

    def test_symbols(self):
        assert Direction.UP.symbol == "<"
        assert Direction.DOWN.symbol == ">"


class TestDirectedEdge:

    def test_down_edge_goes_from_head_to_dependent(self, speech):
        dedge = DirectedEdge.down(speech.nsubj)
        assert dedge.start == speech.gave
        assert dedge.end == speech.obama
        assert dedge.label == "nsubj"

    def test_up_edge_goes_from_dependent_to_head(self, speech):
        dedge = DirectedEdge.up(speech.nsubj)
        assert dedge.start == speech.obama
        assert dedge.end == speech.gave

    def test_flip_keeps_underlying_edge(self, speech):
        dedge = DirectedEdge.up(speech.nsubj)
        flipped = dedge.flip()
        assert flipped.edge == speech.nsubj
        assert flipped.direction is Direction.DOWN
        assert flipped.flip() == dedge

    def test_str(self, speech):
        assert str(DirectedEdge.down(speech.dobj)) == "gave_VBD_1 >dobj> speech_NN_2"


class TestGraph:

    def test_vertices_keep_insertion_order(self, speech):
        assert speech.graph.vertices == (speech.gave, speech.obama, speech.speech)
        assert len(speech.graph) == 3
        assert list(speech.graph) == list(speech.graph.vertices)

    def test_incident_edges_at_head(self, speech):
        edges = speech.graph.incident_edges(speech.gave)
        assert edges == (DirectedEdge.down(speech.nsubj), DirectedEdge.down(speech.dobj))

    def test_incident_edges_at_dependent(self, speech):
        assert speech.graph.incident_edges(speech.obama) == (DirectedEdge.up(speech.nsubj),)

    def test_equal_tokens_are_one_vertex(self):
        assert len(Graph([Token("the", "DT"), Token("the", "DT")])) == 1

    def test_indices_keep_repeated_words_apart(self):
        graph = Graph([Token("the", "DT", index=0), Token("the", "DT", index=3)])
        assert len(graph) == 2

    def test_isolated_vertex_has_no_edges(self):
        lonely = Token("alone", "RB")
        graph = Graph([lonely])
        assert graph.incident_edges(lonely) == ()

    def test_unknown_vertex(self, speech):
        with pytest.raises(GraphError):
            speech.graph.incident_edges(Token("nobody", "NN"))

    def test_edge_with_unknown_endpoint(self, speech):
        stranger = Token("stranger", "NN", index=9)
        with pytest.raises(GraphError, match="unknown vertex"):
            Graph([speech.gave], [Edge(speech.gave, stranger, "dobj")])

    def test_contains(self, speech):
        assert speech.obama in speech.graph
        assert Token("nobody", "NN") not in speech.graph

    def test_duplicate_vertices_and_edges_are_dropped(self, speech):
        graph = Graph(
            [speech.gave, speech.obama, speech.gave],
            [speech.nsubj, speech.nsubj],
        )
        assert graph.vertices == (speech.gave, speech.obama)
        assert graph.edges == (speech.nsubj,)

    def test_from_edges_orders_vertices_by_first_appearance(self, speech):
        graph = Graph.from_edges([speech.dobj, speech.nsubj])
        assert graph.vertices == (speech.gave, speech.speech, speech.obama)

    def test_self_loop_is_listed_in_both_directions(self):
        word = Token("self", "NN")
        loop = Edge(word, word, "dep")
        graph = Graph([word], [loop])
        assert graph.incident_edges(word) == (DirectedEdge.down(loop), DirectedEdge.up(loop))


class TestBipath:

    def test_nodes_follow_the_walk(self, speech):
        path = Bipath([DirectedEdge.up(speech.nsubj), DirectedEdge.down(speech.dobj)])
        assert path.nodes == (speech.obama, speech.gave, speech.speech)
        assert path.start == speech.obama
        assert path.end == speech.speech
        assert len(path) == 2

    def test_reversed(self, speech):
        path = Bipath([DirectedEdge.up(speech.nsubj), DirectedEdge.down(speech.dobj)])
        back = path.reversed()
        assert back.edges == (DirectedEdge.up(speech.dobj), DirectedEdge.down(speech.nsubj))
        assert back.nodes == tuple(reversed(path.nodes))

    def test_empty(self):
        path = Bipath()
        assert len(path) == 0
        assert path.nodes == ()
        assert path == Bipath([])
