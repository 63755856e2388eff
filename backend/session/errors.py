"""Rejected editor actions."""


class SessionError(ValueError):
    """Base class for actions the editor session refuses."""


class SelfLoopError(SessionError):
    def __init__(self, node_id: str):
        super().__init__("Self-connections are not allowed!")
        self.node_id = node_id


class UnknownNodeError(SessionError):
    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class UnknownEdgeError(SessionError):
    def __init__(self, edge_id: str):
        super().__init__(f"Edge not found: {edge_id}")
        self.edge_id = edge_id


class InvalidLabelError(SessionError):
    pass
