"""Shared fixtures: small dependency graphs over Tokens."""

from types import SimpleNamespace

import pytest

from depmatch import Edge, Graph, Token


@pytest.fixture
def speech():
    """Obama gave a speech: ``nsubj(gave, Obama)``, ``dobj(gave, speech)``."""
    obama = Token("Obama", "NNP", "B-NP", index=0)
    gave = Token("gave", "VBD", lemma="give", index=1)
    speech_ = Token("speech", "NN", "B-NP", index=2)
    nsubj = Edge(gave, obama, "nsubj")
    dobj = Edge(gave, speech_, "dobj")
    graph = Graph([gave, obama, speech_], [nsubj, dobj])
    return SimpleNamespace(
        graph=graph, gave=gave, obama=obama, speech=speech_, nsubj=nsubj, dobj=dobj
    )


@pytest.fixture
def two_subjects():
    """Two parallel ``nsubj`` edges out of ``gave``."""
    gave = Token("gave", "VBD", lemma="give", index=0)
    obama = Token("Obama", "NNP", "B-NP", index=1)
    biden = Token("Biden", "NNP", "B-NP", index=2)
    graph = Graph(
        [gave, obama, biden],
        [Edge(gave, obama, "nsubj"), Edge(gave, biden, "nsubj")],
    )
    return SimpleNamespace(graph=graph, gave=gave, obama=obama, biden=biden)


CONLLU_SAMPLE = """# sent_id = 1
# text = Obama gave a speech.
1\tObama\tObama\tPROPN\tNNP\t_\t2\tnsubj\t_\tChunk=B-NP
2\tgave\tgive\tVERB\tVBD\t_\t0\troot\t_\t_
3\ta\ta\tDET\tDT\t_\t4\tdet\t_\tChunk=B-NP
4\tspeech\tspeech\tNOUN\tNN\t_\t2\tobj\t_\tChunk=I-NP|SpaceAfter=No
5\t.\t.\tPUNCT\t.\t_\t2\tpunct\t_\t_

# sent_id = 2
# text = Biden didn't speak.
1\tBiden\tBiden\tPROPN\tNNP\t_\t4\tnsubj\t_\t_
2-3\tdidn't\t_\t_\t_\t_\t_\t_\t_\t_
2\tdid\tdo\tAUX\tVBD\t_\t4\taux\t_\t_
3\tn't\tnot\tPART\tRB\t_\t4\tadvmod\t_\t_
4\tspeak\tspeak\tVERB\tVB\t_\t0\troot\t_\t_

"""


@pytest.fixture
def conllu_text():
    return CONLLU_SAMPLE


@pytest.fixture
def conllu_file(tmp_path):
    path = tmp_path / "sample.conllu"
    path.write_text(CONLLU_SAMPLE, encoding="utf-8")
    return path
