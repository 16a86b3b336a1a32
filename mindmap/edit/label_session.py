"""
Scoped label editing for a single node.

Every keystroke is pushed to the model immediately, so there is nothing to
commit when the session ends; closing only stops further writes.
"""

import logging
from typing import Optional

from mindmap.edit.constants import CONFIRM_KEY
from mindmap.graph_model import GraphModel

logger = logging.getLogger(__name__)


class LabelEditSession:
    """Live label editor bound to one node id for its whole lifetime."""

    def __init__(self, model: GraphModel, node_id: str):
        self._model = model
        self.node_id = node_id
        node = model.get_node(node_id)
        self.text = node.label if node else ''
        self._open = node is not None

    @property
    def is_open(self) -> bool:
        return self._open

    def update(self, text: Optional[str]) -> bool:
        """Apply the current input text as the node label. Empty labels are fine."""
        if not self._open:
            return False
        self.text = text or ''
        return self._model.update_node(self.node_id, label=self.text)

    def handle_key(self, key: str) -> bool:
        """Close on the confirm key. Returns True if the session ended."""
        if self._open and key == CONFIRM_KEY:
            self.close()
            return True
        return False

    def close(self) -> None:
        if self._open:
            logger.debug(f"Closed label session for {self.node_id}")
        self._open = False

    def __enter__(self) -> 'LabelEditSession':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
