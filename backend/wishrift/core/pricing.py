from wishrift.core.errors import ValidationError


def validate_cents(value, field: str, *, allow_zero: bool = True) -> int:
    """Money is always an integer amount of cents."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer number of cents", field)
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "greater than zero"
        raise ValidationError(f"{field} must be {bound}", field)
    return value
