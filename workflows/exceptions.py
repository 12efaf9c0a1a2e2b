"""
Errors raised by the email workflow engine and its admin operations
"""


class WorkflowError(Exception):
    """Base class for email workflow errors"""


class WorkflowValidationError(WorkflowError):
    """A required workflow field is missing or malformed; nothing was written"""

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = {'non_field_errors': [errors]}
        self.errors = errors
        super().__init__('; '.join(
            f"{field}: {', '.join(messages)}" for field, messages in errors.items()
        ))


class UnresolvedRecipient(WorkflowError):
    """Recipient resolution produced no destination address"""

    def __init__(self, workflow, reason):
        self.workflow = workflow
        self.reason = reason
        super().__init__(f"Workflow {workflow.pk} ({workflow.name}) has no recipients: {reason}")


class DeliveryFailure(WorkflowError):
    """The mail transport rejected the message, errored or timed out"""

    def __init__(self, to_address, reason):
        self.to_address = to_address
        self.reason = reason
        super().__init__(f"Delivery to {to_address} failed: {reason}")


class Unauthenticated(WorkflowError):
    """An operation that needs an operator credential was called without one"""

    def __init__(self, message='Not authenticated'):
        super().__init__(message)


class StoreError(WorkflowError):
    """Reading or writing workflow records failed"""
