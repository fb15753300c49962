"""
YAML change requests for a concept store.

Typical use::

    store = ConceptStore.load("graph.json")
    request = load_change_request("changes.yaml")

    validation = validate_change_request(request, store)
    if validation.is_valid:
        result = execute_change_request(request, store, atomic=True)
        if not result.rolled_back:
            store.save("graph.json")
"""

from .schema import (
    OperationType as OperationType,
    REQUIRED_FIELDS as REQUIRED_FIELDS,
    OPTIONAL_FIELDS as OPTIONAL_FIELDS,
    Change as Change,
    ChangeRequest as ChangeRequest,
    ChangeError as ChangeError,
    ChangeWarning as ChangeWarning,
    RequestValidation as RequestValidation,
    ChangeResult as ChangeResult,
    BatchResult as BatchResult,
)
from .parser import (
    ParseError as ParseError,
    load_change_request as load_change_request,
    load_yaml_file as load_yaml_file,
)
from .validator import validate_change_request as validate_change_request
from .executor import execute_change_request as execute_change_request

__all__ = [
    "OperationType",
    "REQUIRED_FIELDS",
    "OPTIONAL_FIELDS",
    "Change",
    "ChangeRequest",
    "ChangeError",
    "ChangeWarning",
    "RequestValidation",
    "ChangeResult",
    "BatchResult",
    "ParseError",
    "load_change_request",
    "load_yaml_file",
    "validate_change_request",
    "execute_change_request",
]
