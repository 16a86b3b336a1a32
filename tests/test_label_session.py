"""Tests for LabelEditSession."""

import random

import pytest

from mindmap.edit import LabelEditSession
from mindmap.graph import ROOT_LABEL
from mindmap.graph_model import GraphModel


@pytest.fixture
def model():
    return GraphModel(rng=random.Random(0))


def test_session_starts_with_current_label(model):
    session = LabelEditSession(model, '1')
    assert session.is_open
    assert session.text == ROOT_LABEL


def test_update_writes_through(model):
    session = LabelEditSession(model, '1')
    assert session.update('Plan') is True
    assert model.get_node('1').label == 'Plan'


def test_empty_and_none_become_empty_label(model):
    session = LabelEditSession(model, '1')
    session.update('')
    assert model.get_node('1').label == ''
    session.update(None)
    assert model.get_node('1').label == ''


def test_closed_session_stops_writing(model):
    session = LabelEditSession(model, '1')
    session.close()
    assert session.update('late') is False
    assert model.get_node('1').label == ROOT_LABEL


def test_enter_closes_session(model):
    session = LabelEditSession(model, '1')
    assert session.handle_key('Tab') is False
    assert session.handle_key('Enter') is True
    assert not session.is_open


def test_context_manager_closes(model):
    with LabelEditSession(model, '1') as session:
        session.update('Scoped')
    assert not session.is_open
    assert model.get_node('1').label == 'Scoped'


def test_unknown_node_session_is_closed(model):
    session = LabelEditSession(model, 'ghost')
    assert not session.is_open
    assert session.update('x') is False


def test_removed_node_is_not_resurrected(model):
    child = model.spawn_child('1')
    session = LabelEditSession(model, child)
    model.remove_node(child)
    assert session.update('still typing') is False
    assert not model.has_node(child)
