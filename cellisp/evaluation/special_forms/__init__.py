"""Registry of special forms for the Cellisp evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table before ordinary application. Keywords are
recognized case-insensitively because Symbols are.
"""

from cellisp.types.symbol import Symbol
from cellisp.evaluation.special_forms.quote_forms import quote_form
from cellisp.evaluation.special_forms.if_form import if_form
from cellisp.evaluation.special_forms.define_form import define_form
from cellisp.evaluation.special_forms.lambda_form import lambda_form

SPECIAL_FORMS = {
    Symbol("quote"): quote_form,
    Symbol("if"): if_form,
    Symbol("define"): define_form,
    Symbol("lambda"): lambda_form,
}
