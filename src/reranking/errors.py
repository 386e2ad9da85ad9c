"""
Reranker error taxonomy.

Every fallible stage raises one of these; only the invocation boundary
(invocation.py) turns them into the error-output shape.
"""


class RerankError(Exception):
    """Base class for failures that abort a rerank invocation"""


class InputMissingError(RerankError):
    """No request record or no candidate items were provided"""


class SchemaInvalidError(RerankError):
    """Request fields have the wrong type"""


class ModelConfigInvalidError(RerankError):
    """Learned-model mode enabled without exactly 5 numeric coefficients"""
