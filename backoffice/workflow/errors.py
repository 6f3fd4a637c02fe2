class WorkflowError(Exception):
    """Base for errors the workflow layer reports to the user."""
    message = "Workflow error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)

class TransitionNotPermitted(WorkflowError):
    message = "not permitted"

class TransitionInProgress(WorkflowError):
    message = "A status change for this factor is already in progress"

class FactorNotFound(WorkflowError):
    message = "Factor not found"

class FactorReadOnly(WorkflowError):
    message = "Factor is finalized and cannot be edited"
