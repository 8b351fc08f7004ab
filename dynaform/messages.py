"""User-facing messages for validation outcomes.

Only one message is ever surfaced per outcome: the first error kind found
in :data:`MESSAGE_PRIORITY`. Messages are in Spanish, the form's only locale.
"""

import typing

from .options import FieldType
from .result import ErrorKind, ValidationOutcome

if typing.TYPE_CHECKING:
    from .schema import FieldDescriptor

MESSAGE_PRIORITY: tuple[ErrorKind, ...] = (
    ErrorKind.REQUIRED,
    ErrorKind.PATTERN,
    ErrorKind.MIN_LENGTH,
    ErrorKind.MAX_LENGTH,
    ErrorKind.EMAIL,
    ErrorKind.MIN,
    ErrorKind.MAX,
    ErrorKind.MIN_DATE,
    ErrorKind.INVALID_PHONE,
    ErrorKind.MAX_SIZE,
    ErrorKind.INVALID_TYPE,
    ErrorKind.INVALID_LENGTH,
    ErrorKind.PASSWORD_MISMATCH,
)

GENERIC_MESSAGE = "Campo inválido"
SUCCESS_MESSAGE = "Campo completado correctamente"
SUBMIT_SUCCESS_MESSAGE = "Formulario enviado correctamente"
SUBMIT_ERROR_MESSAGE = "No se pudo enviar el formulario, intente nuevamente"

_PATTERN_MESSAGES: dict[FieldType, str] = {
    FieldType.TEXT: "Solo se permiten letras y espacios",
    FieldType.EMAIL: "Formato de email inválido",
    FieldType.PHONE: "Formato de teléfono inválido",
    FieldType.TEL: "Formato de teléfono inválido",
}

_PLACEHOLDERS: dict[FieldType, str] = {
    FieldType.TEXT: "Ingrese su respuesta aquí...",
    FieldType.EMAIL: "ejemplo@correo.com",
    FieldType.PASSWORD: "Ingrese su contraseña",
    FieldType.NUMBER: "Ingrese un número",
    FieldType.TEL: "+1 234 567 8900",
    FieldType.PHONE: "+1 234 567 8900",
    FieldType.DATE: "dd/mm/yyyy",
    FieldType.URL: "https://ejemplo.com",
}

_ACCEPT_ATTRIBUTES: dict[str, str] = {
    "image": "image/*",
    "document": ".pdf,.doc,.docx,.txt",
    "spreadsheet": ".xlsx,.xls,.csv",
    "any": "*/*",
}


def _format_number(value: float | None) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _format_size(size: int | None) -> str:
    if size is None:
        return ""
    mebibytes = size / (1024 * 1024)
    if mebibytes.is_integer():
        return f"{int(mebibytes)}MB"
    return f"{mebibytes:.1f}MB"


def pattern_message(field_type: FieldType | None) -> str:
    """Message for a ``pattern`` error, worded for the field type."""
    if field_type is None:
        return "Formato inválido"
    return _PATTERN_MESSAGES.get(field_type, "Formato inválido")


def message_for(kind: ErrorKind, descriptor: "FieldDescriptor | None" = None) -> str | None:
    """Message for one error kind, or None if the kind has no dedicated message.

    Args:
        kind: Error kind
        descriptor: Field the error belongs to, used for labels and limits

    Returns:
        Message text, or None
    """
    constraints = descriptor.effective_constraints if descriptor is not None else None
    label = descriptor.label_or_key if descriptor is not None else "Este campo"

    if kind is ErrorKind.REQUIRED:
        return f"{label} es obligatorio"
    if kind is ErrorKind.PATTERN:
        return pattern_message(descriptor.type if descriptor is not None else None)
    if kind is ErrorKind.MIN_LENGTH:
        n = constraints.min_length if constraints is not None else None
        return f"Mínimo {n} caracteres" if n is not None else "Texto demasiado corto"
    if kind is ErrorKind.MAX_LENGTH:
        n = constraints.max_length if constraints is not None else None
        return f"Máximo {n} caracteres" if n is not None else "Texto demasiado largo"
    if kind is ErrorKind.EMAIL:
        return "Ingrese un email válido"
    if kind is ErrorKind.MIN:
        return f"El valor mínimo es {_format_number(constraints.min if constraints else None)}".rstrip()
    if kind is ErrorKind.MAX:
        return f"El valor máximo es {_format_number(constraints.max if constraints else None)}".rstrip()
    if kind is ErrorKind.MIN_DATE:
        return "La fecha debe ser posterior a hoy"
    if kind is ErrorKind.INVALID_PHONE:
        return "Ingrese un número telefónico válido"
    if kind is ErrorKind.MAX_SIZE:
        size = constraints.max_file_size_bytes if constraints is not None else None
        return f"El archivo no puede superar los {_format_size(size or 5 * 1024 * 1024)}"
    if kind is ErrorKind.INVALID_TYPE:
        return "Tipo de archivo no permitido"
    if kind is ErrorKind.INVALID_LENGTH:
        return "La longitud del texto no es válida"
    if kind is ErrorKind.PASSWORD_MISMATCH:
        return "Las contraseñas no coinciden"
    return None


def get_error_message(
    outcome: ValidationOutcome, descriptor: "FieldDescriptor | None" = None
) -> str:
    """Resolve the single message to show for an outcome.

    Args:
        outcome: Validation outcome of the field
        descriptor: Field the outcome belongs to

    Returns:
        ``""`` for a Valid outcome, otherwise the message of the first error
        kind in priority order, or a generic message
    """
    if outcome.is_valid:
        return ""
    for kind in MESSAGE_PRIORITY:
        if kind in outcome.errors:
            message = message_for(kind, descriptor)
            if message is not None:
                return message
    return GENERIC_MESSAGE


def placeholder_for(descriptor: "FieldDescriptor") -> str:
    """Placeholder text: the descriptor's own, else a per-type default."""
    if descriptor.placeholder is not None:
        return descriptor.placeholder
    return _PLACEHOLDERS.get(descriptor.type, "Ingrese su respuesta...")


def accepted_file_types(descriptor: "FieldDescriptor") -> str:
    """Value for an HTML ``accept`` attribute of a file field."""
    accept = descriptor.constraints.accept
    if accept is None:
        return "*/*"
    return _ACCEPT_ATTRIBUTES.get(accept.strip().lower(), accept)
