# dietplan/interpreter/errors.py
"""
Errors raised by the strict JSON plan extractor.

Every error carries a ``kind`` tag and a dotted ``path`` naming the offending
field. Syntax problems (the text is not JSON at all) are kept apart from schema
validation problems (valid JSON in the wrong shape).
"""

from dietplan.models.parse_outcome import ExtractionErrorInfo


class PlanExtractionError(Exception):
    kind = "extraction_error"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")

    def to_info(self) -> ExtractionErrorInfo:
        return ExtractionErrorInfo(kind=self.kind, path=self.path, reason=self.reason)


class PlanSyntaxError(PlanExtractionError):
    kind = "syntax_error"

    def __init__(self, reason: str, path: str = "$"):
        super().__init__(path, reason)


class NoStructureFound(PlanExtractionError):
    kind = "no_structure_found"

    def __init__(self, expected_key: str):
        super().__init__(expected_key, f"no JSON object found, expected an object with '{expected_key}' key")


class PlanValidationError(PlanExtractionError):
    kind = "validation_error"


class MissingField(PlanValidationError):
    kind = "missing_field"

    def __init__(self, path: str):
        super().__init__(path, f"missing required field: {path}")


class InvalidType(PlanValidationError):
    kind = "invalid_type"


class InvalidNumber(PlanValidationError):
    kind = "invalid_number"


class EmptyArray(PlanValidationError):
    kind = "empty_array"

    def __init__(self, path: str):
        super().__init__(path, "array cannot be empty")
