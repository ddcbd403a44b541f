"""
Schema-driven parameter forms.

- `kinds`: closed enumerations for parameter kinds and control kinds
- `controls`: control plan entries and operator-input coercion
- `interpreter`: schema -> validation model, defaults and control plan
- `form`: the mutable value mapping for one protocol

Examples
--------
```python
from protorunner.form import ProtocolForm
form = ProtocolForm(protocol)
form.set_raw("speed", "250")
form.errors()  # {"speed": ["Must be less than or equal to 200"]}
```
"""

from .controls import (
    ControlSpec,
    coerce,
    control_for,
    display_value,
    range_step,
    slider_position,
    toggle_label,
)
from .form import ProtocolForm
from .interpreter import (
    MSG_REQUIRED,
    FieldPlan,
    FormPlan,
    ValidationModel,
    default_values,
    interpret,
    is_empty,
    validation_model,
)
from .kinds import ControlKind, ParamKind, classify

__all__ = [
    "MSG_REQUIRED",
    "ControlKind",
    "ControlSpec",
    "FieldPlan",
    "FormPlan",
    "ParamKind",
    "ProtocolForm",
    "ValidationModel",
    "classify",
    "coerce",
    "control_for",
    "default_values",
    "display_value",
    "interpret",
    "is_empty",
    "range_step",
    "slider_position",
    "toggle_label",
    "validation_model",
]
