"""Registry of special forms for the expander.

Maps head identifiers to step generators that build dedicated AST nodes. The
expander consults this table before treating an array as an ordinary call.
"""

from oreore.expansion.special_forms.defun_form import defun_form
from oreore.expansion.special_forms.if_form import if_form

SPECIAL_FORMS = {
    "defun": defun_form,
    "if": if_form,
}
