# ============================================================================
# TEMPLATE RESOLUTION ENGINE
# ============================================================================
# EPOCH: 6 - DASHBOARD RUNTIME
# STATUS: Core - Variable substitution and inline expressions
# PURPOSE: Resolve @tokens and {{ }} expressions in request templates
# CREATED: 04 FEB 2026
# ============================================================================
"""
Template Resolution Engine

Resolves templated request values against one run's lookup context.

Supported patterns:
- @Title                    - Run input value by Title
- @"Title with spaces"      - Run input value by quoted Title
- @current_user.<field>     - id, email, firstName, lastName
- {{ <expr> }}              - Inline expression over substituted values

Unknown tokens are left untouched so partially configured templates (an
unset secret placeholder, an e-mail address in a body) pass through.

Expression grammar:
    expr    := product [ "?" expr ":" expr ]
    product := unary { "*" unary }
    unary   := ( "-" | "+" ) unary | atom
    atom    := NUMBER | true | false

Examples:
    body:
      amount: "{{ @Debit ? -1 * @Amount : @Amount }}"
      owner:  "@current_user.email"
    url: "https://api.example.com/users/@userId"
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from core.errors import ValidationError
from core.models.layers import KeyValuePair
from core.models.request import CurrentUser, ExecutableRequest, RunInputValue, input_values_to_dict

logger = logging.getLogger(__name__)

CURRENT_USER_PREFIX = "current_user"

# @"quoted title" | @name | @name.field
TOKEN_PATTERN = re.compile(
    r'@(?:"(?P<quoted>[^"]*)"'
    r'|(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:\.(?P<field>[A-Za-z_][A-Za-z0-9_]*))?)'
)
EXPRESSION_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")

ExpressionValue = Union[Decimal, bool]


class TemplateExpressionError(ValidationError):
    """Raised when a {{ }} block cannot be evaluated."""
    pass


# ============================================================================
# CONTEXT
# ============================================================================

class TemplateContext:
    """
    Lookup values for template resolution.

    Provides access to:
    - variables: run input values by Title
    - current_user: the four fixed user fields
    - prior_response: prepare run response during dashboard action runs
    """

    def __init__(
        self,
        variables: Optional[Mapping[str, str]] = None,
        current_user: Optional[CurrentUser] = None,
        prior_response: Optional[str] = None,
    ):
        self.variables: Dict[str, str] = dict(variables or {})
        self.user_fields: Dict[str, str] = (
            current_user.template_fields() if current_user else {}
        )
        self.prior_response = prior_response

    def lookup(self, name: str) -> Optional[str]:
        return self.variables.get(name)

    def current_user_field(self, field: str) -> Optional[str]:
        return self.user_fields.get(field)

    @classmethod
    def for_run(
        cls,
        input_values: Iterable[RunInputValue],
        current_user: CurrentUser,
        prior_response: Optional[str] = None,
    ) -> "TemplateContext":
        return cls(
            variables=input_values_to_dict(input_values),
            current_user=current_user,
            prior_response=prior_response,
        )


# ============================================================================
# EXPRESSION EVALUATOR
# ============================================================================

_EXPRESSION_TOKEN = re.compile(
    r"\s*(?:(?P<number>\d+(?:\.\d+)?|\.\d+)"
    r"|(?P<word>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>[?:*+\-])"
    r"|(?P<other>\S))"
)


class ExpressionEvaluator:
    """
    Evaluates the inline expression language.

    Supports:
    - Ternary: cond ? a : b (cond must be true/false)
    - Unary negation: -x
    - Multiplication: a * b
    Numbers use Decimal so whole results print without a fraction.
    """

    def evaluate(self, expression: str) -> ExpressionValue:
        tokens = self._tokenize(expression)
        if not tokens:
            raise TemplateExpressionError("Empty expression")
        parser = _ExpressionParser(tokens, expression)
        return parser.parse()

    def evaluate_to_text(self, expression: str) -> str:
        return format_expression_value(self.evaluate(expression))

    def _tokenize(self, expression: str) -> List[Tuple[str, str]]:
        tokens = []
        for match in _EXPRESSION_TOKEN.finditer(expression):
            kind = match.lastgroup
            if kind is None:
                continue
            text = match.group(kind)
            if kind == "other":
                if text == "@":
                    raise TemplateExpressionError(
                        f"Unresolved variable in expression '{expression.strip()}'"
                    )
                raise TemplateExpressionError(
                    f"Unsupported character '{text}' in expression '{expression.strip()}'"
                )
            tokens.append((kind, text))
        return tokens


class _ExpressionParser:
    """Recursive-descent parser evaluating as it goes."""

    def __init__(self, tokens: List[Tuple[str, str]], source: str):
        self._tokens = tokens
        self._pos = 0
        self._source = source.strip()

    def parse(self) -> ExpressionValue:
        value = self._expr()
        if self._pos < len(self._tokens):
            raise self._error(f"Unexpected '{self._tokens[self._pos][1]}'")
        return value

    def _error(self, message: str) -> TemplateExpressionError:
        return TemplateExpressionError(f"{message} in expression '{self._source}'")

    def _accept(self, op: str) -> bool:
        if self._pos < len(self._tokens) and self._tokens[self._pos] == ("op", op):
            self._pos += 1
            return True
        return False

    def _expr(self) -> ExpressionValue:
        condition = self._product()
        if not self._accept("?"):
            return condition
        when_true = self._expr()
        if not self._accept(":"):
            raise self._error("Expected ':'")
        when_false = self._expr()
        if not isinstance(condition, bool):
            raise self._error("Ternary condition must be true or false")
        return when_true if condition else when_false

    def _product(self) -> ExpressionValue:
        left = self._unary()
        while self._accept("*"):
            right = self._unary()
            if isinstance(left, bool) or isinstance(right, bool):
                raise self._error("Cannot multiply a boolean")
            left = left * right
        return left

    def _unary(self) -> ExpressionValue:
        if self._accept("-"):
            value = self._unary()
            if isinstance(value, bool):
                raise self._error("Cannot negate a boolean")
            return -value
        if self._accept("+"):
            value = self._unary()
            if isinstance(value, bool):
                raise self._error("Cannot apply unary plus to a boolean")
            return value
        return self._atom()

    def _atom(self) -> ExpressionValue:
        if self._pos >= len(self._tokens):
            raise self._error("Unexpected end")
        kind, text = self._tokens[self._pos]
        self._pos += 1
        if kind == "number":
            try:
                return Decimal(text)
            except InvalidOperation:
                raise self._error(f"Invalid number '{text}'")
        if kind == "word" and text.lower() in ("true", "false"):
            return text.lower() == "true"
        raise self._error(f"Unexpected '{text}'")


def format_expression_value(value: ExpressionValue) -> str:
    """Textual form: true/false, integers without a fraction."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


# ============================================================================
# RESOLVER
# ============================================================================

class TemplateResolver:
    """
    Resolves @tokens and {{ }} blocks in template strings.

    Substitution is single pass: inserted values are never re-scanned.
    """

    def __init__(self):
        self._evaluator = ExpressionEvaluator()

    def resolve(self, template: Optional[str], context: TemplateContext) -> Optional[str]:
        """
        Resolve one template string.

        Raises:
            TemplateExpressionError: If a {{ }} block cannot be evaluated
        """
        if not template or ("@" not in template and "{{" not in template):
            return template

        parts = []
        pos = 0
        for match in EXPRESSION_PATTERN.finditer(template):
            parts.append(self._substitute(template[pos:match.start()], context))
            substituted = self._substitute(match.group(1), context)
            parts.append(self._evaluator.evaluate_to_text(substituted))
            pos = match.end()
        parts.append(self._substitute(template[pos:], context))
        return "".join(parts)

    def resolve_pairs(
        self,
        pairs: Iterable[KeyValuePair],
        context: TemplateContext,
    ) -> List[KeyValuePair]:
        """Resolve values only; keys are never templated."""
        return [
            KeyValuePair(key=pair.key, value=self.resolve(pair.value, context))
            for pair in pairs
        ]

    def resolve_request(
        self,
        request: ExecutableRequest,
        context: TemplateContext,
    ) -> ExecutableRequest:
        return request.model_copy(update={
            "base_url": self.resolve(request.base_url, context),
            "url_parameters": self.resolve_pairs(request.url_parameters, context),
            "headers": self.resolve_pairs(request.headers, context),
            "body": self.resolve_pairs(request.body, context),
        })

    def has_templates(self, value: str) -> bool:
        return bool(TOKEN_PATTERN.search(value) or EXPRESSION_PATTERN.search(value))

    def _substitute(self, text: str, context: TemplateContext) -> str:
        if "@" not in text:
            return text

        def replace(match: "re.Match") -> str:
            quoted = match.group("quoted")
            if quoted is not None:
                value = context.lookup(quoted)
                return match.group(0) if value is None else value

            name = match.group("name")
            field = match.group("field")
            if name == CURRENT_USER_PREFIX and field is not None:
                value = context.current_user_field(field)
                if value is None:
                    logger.debug(f"Unknown current_user field left unresolved: {field}")
                    return match.group(0)
                return value

            value = context.lookup(name)
            if value is None:
                return match.group(0)
            # Only the name is a token; ".suffix" is literal text
            return value if field is None else f"{value}.{field}"

        return TOKEN_PATTERN.sub(replace, text)


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

_resolver: Optional[TemplateResolver] = None


def get_resolver() -> TemplateResolver:
    """Get shared template resolver instance."""
    global _resolver
    if _resolver is None:
        _resolver = TemplateResolver()
    return _resolver


def resolve_template(
    template: str,
    variables: Optional[Mapping[str, str]] = None,
    current_user: Optional[CurrentUser] = None,
) -> str:
    """
    Convenience function to resolve one template string.

    Args:
        template: Text with @tokens and {{ }} blocks
        variables: Input values by Title
        current_user: Optional user for @current_user.<field>

    Returns:
        Resolved text
    """
    context = TemplateContext(variables=variables, current_user=current_user)
    return get_resolver().resolve(template, context)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TemplateResolver",
    "TemplateContext",
    "ExpressionEvaluator",
    "TemplateExpressionError",
    "format_expression_value",
    "get_resolver",
    "resolve_template",
]
