"""
Question forum support.

Modules
=======

``forms``
    Basic/detailed question records, their modals and the submission parser.
``draft``
    :class:`QuestionDraft`, the lock-guarded inputs shared by a session's
    listener tasks.
``views``
    Component ids and layouts for the form, the post and the close dialog.
``workflow``
    :class:`QuestionWorkflow`, the ``/question`` state machine.
``close``
    The "mark solved" confirm dialog attached to every post.
"""

from .close import handle_close_request
from .views import QUESTION_CLOSE_PREFIX
from .workflow import QuestionWorkflow, WorkflowState

__all__ = ["QUESTION_CLOSE_PREFIX", "QuestionWorkflow", "WorkflowState", "handle_close_request"]
