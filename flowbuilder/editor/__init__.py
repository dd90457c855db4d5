"""The live editing session for the current workflow."""

from flowbuilder.editor.editor_session import EditorSession, WorkflowExport

__all__ = ["EditorSession", "WorkflowExport"]
