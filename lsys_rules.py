######################################################################
#
# lsys_rules.py
#
######################################################################
#
# Rewrite rules for parametric L-Systems. A rule is written as
#
#   predecessor => successor
#
# where either side may carry a single parenthesized parameter:
#
#   F(i>0) => F(i+0.1)
#
# The parenthesized text on the predecessor is a conditional that
# gates the rule, the one on the successor is an update applied to the
# matched symbol's attribute. Only the operators '>' and '=' are
# understood in conditionals, and only '=' and '+' in updates.
#
# Nothing in here raises on malformed rule text: a bad conditional
# just doesn't match, a bad update leaves the attribute alone.
# validate_rules_text() is there to report such problems to a user.

import re
import warnings
from collections import namedtuple
from enum import Enum

RULE_ARROW = '=>'

######################################################################
# strip the first (...) pair from a token, returning the remaining
# text and the bracket contents, e.g.
#
#   'F(i=0.1)'       -> ('F', 'i=0.1')
#   'foofoo(bar)foo' -> ('foofoofoo', 'bar')
#
# anything malformed comes back untouched with empty contents.

def extract_brackets(token):

    open_pos = token.find('(')

    if open_pos == -1:
        return token, ''

    close_pos = token.find(')')

    if close_pos == -1 or close_pos < open_pos:
        return token, ''

    bare = token[:open_pos] + token[close_pos+1:]
    contents = token[open_pos+1:close_pos]

    return bare, contents

######################################################################
# a run of count spaces; negative counts give an empty string

def spaces(count):
    if count < 0:
        return ''
    return ' ' * count

# pad s with trailing spaces up to length count (never truncates)

def pad(s, count):
    return s + spaces(count - len(s))

######################################################################

class ConditionOp(Enum):
    GREATER = '>'
    EQUAL = '='

class ArithmeticOp(Enum):
    ASSIGN = '='
    INCREMENT = '+'

# name, op, literal - literal is kept as text and converted on use
Expression = namedtuple('Expression', 'name, op, literal')

def _parse_float(text):

    try:
        value = float(text)
    except ValueError:
        return None

    # float() accepts 'nan', which never compares sensibly
    if value != value:
        return None

    return value

# format a number the way the attribute was originally written: whole
# numbers below 1e21 without a trailing '.0', everything else in
# shortest form with a bare exponent ('1e+21', '1e-7')

EXPONENT = re.compile(r'e([+-])0*(\d)')

def format_number(value):
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return EXPONENT.sub(r'e\1\2', repr(value))

# split 'name=value' into its two halves, or None

def parse_attribute(attribute):

    name, sep, value = attribute.partition('=')

    if not sep:
        return None

    return name.strip(), value.strip()

######################################################################
# parse a conditional such as 'i>0' or 'i=0.5'. The '>' operator is
# tried first, then '='.

def parse_conditional(conditional):

    for op in (ConditionOp.GREATER, ConditionOp.EQUAL):
        name, sep, literal = conditional.partition(op.value)
        if sep:
            return Expression(name.strip(), op, literal.strip())

    return None

######################################################################
# parse an attribute update such as 'i=0.2' or 'i+0.1'. Assignment is
# tried first, then increment.

def parse_arithmetic(arithmetic):

    for op in (ArithmeticOp.ASSIGN, ArithmeticOp.INCREMENT):
        name, sep, literal = arithmetic.partition(op.value)
        if sep:
            return Expression(name.strip(), op, literal.strip())

    return None

######################################################################

class Rule(namedtuple('Rule',
                      'predecessor, conditional, successor, attribute_arithmetic')):

    """A compiled rewrite rule.

    Built from the predecessor and successor text as typed by a user;
    each side goes through extract_brackets() exactly once, so

        Rule('F(i>0)', 'F(i+0.1)')

    has predecessor 'F', conditional 'i>0', successor 'F' and
    attribute_arithmetic 'i+0.1'. Rules compare equal when all four
    fields are equal.
    """

    __slots__ = ()

    def __new__(cls, predecessor, successor):
        predecessor, conditional = extract_brackets(predecessor)
        successor, attribute_arithmetic = extract_brackets(successor)
        return super().__new__(cls, predecessor, conditional,
                               successor, attribute_arithmetic)

    def __getnewargs__(self):
        return self.predecessor_text, self.successor_text

    # rule text with any parameters put back in brackets

    @property
    def predecessor_text(self):
        return _with_brackets(self.predecessor, self.conditional)

    @property
    def successor_text(self):
        return _with_brackets(self.successor, self.attribute_arithmetic)

def _with_brackets(bare, contents):
    if not contents:
        return bare
    return bare + '(' + contents + ')'

######################################################################
# does an attribute like 'i=0.1' satisfy a conditional like 'i>0'?
# An empty conditional always matches. Equality is exact floating
# point equality, so 'i=0.3' will not match an attribute reached by
# adding 0.1 three times.

def matches_conditional(attribute, conditional):

    if not conditional:
        return True

    attr = parse_attribute(attribute)
    cond = parse_conditional(conditional)

    if attr is None or cond is None:
        return False

    attr_name, attr_literal = attr

    if attr_name != cond.name:
        return False

    value = _parse_float(attr_literal)
    threshold = _parse_float(cond.literal)

    if value is None or threshold is None:
        return False

    if cond.op is ConditionOp.GREATER:
        return value > threshold
    else:
        return value == threshold

######################################################################
# compute the attribute to attach to a rule's successor. Returns a
# full 'name=value' fragment; the name is the one on the left of the
# rule's update expression.

def apply_arithmetic(attribute, rule):

    if not rule.attribute_arithmetic:
        return attribute

    expr = parse_arithmetic(rule.attribute_arithmetic)
    attr = parse_attribute(attribute)

    if expr is None or attr is None:
        return attribute

    current = _parse_float(attr[1])
    operand = _parse_float(expr.literal)

    if current is None or operand is None:
        return attribute

    if expr.op is ArithmeticOp.ASSIGN:
        result = operand
    else:
        result = current + operand

    return expr.name + '=' + format_number(result)

######################################################################
# text format used to edit rules, one per line:
#
#   F(i>0) => F(i+0.1)
#   X => F[+X]F[-X]+X

def parse_rules_text(text):

    rules = []

    for line_no, line in enumerate(text.splitlines(), start=1):

        if not line.strip():
            continue

        lhs, sep, rhs = line.partition(RULE_ARROW)
        lhs = lhs.strip()

        if not sep:
            warnings.warn('ignoring rule line {}, no "{}": {!r}'.format(
                line_no, RULE_ARROW, line), UserWarning, stacklevel=2)
            continue

        if not lhs:
            warnings.warn('ignoring rule line {}, empty predecessor: {!r}'.format(
                line_no, line), UserWarning, stacklevel=2)
            continue

        rules.append(Rule(lhs, rhs.strip()))

    return rules

def format_rules_text(rules, align=False):

    width = 0
    if align and rules:
        width = max(len(rule.predecessor_text) for rule in rules)

    lines = []

    for rule in rules:
        lhs = pad(rule.predecessor_text, width)
        lines.append('{} {} {}'.format(lhs, RULE_ARROW, rule.successor_text))

    return '\n'.join(lines)

######################################################################
# report everything the engine would silently ignore in a block of
# rule text. Returns a list of RuleProblem, empty if all is well.

RuleProblem = namedtuple('RuleProblem', 'line_no, line, message')

def _bracket_problem(side, text):

    if text.count('(') != text.count(')'):
        return 'unbalanced parentheses in {} {!r}'.format(side, text)

    if text.count('(') > 1:
        return 'only one parameter allowed in {} {!r}'.format(side, text)

    bare, contents = extract_brackets(text)
    if '(' in text and not contents:
        return 'malformed parameter in {} {!r}'.format(side, text)

    return None

def validate_rules_text(text):

    problems = []

    for line_no, line in enumerate(text.splitlines(), start=1):

        if not line.strip():
            continue

        lhs, sep, rhs = line.partition(RULE_ARROW)
        lhs = lhs.strip()
        rhs = rhs.strip()

        if not sep:
            problems.append(RuleProblem(line_no, line,
                                        'missing "{}"'.format(RULE_ARROW)))
            continue

        if not lhs:
            problems.append(RuleProblem(line_no, line, 'empty predecessor'))
            continue

        messages = [_bracket_problem('predecessor', lhs),
                    _bracket_problem('successor', rhs)]

        rule = Rule(lhs, rhs)

        if rule.conditional:
            cond = parse_conditional(rule.conditional)
            if (cond is None or not cond.name or
                    _parse_float(cond.literal) is None):
                messages.append('cannot parse conditional {!r}'.format(
                    rule.conditional))

        if rule.attribute_arithmetic:
            expr = parse_arithmetic(rule.attribute_arithmetic)
            if (expr is None or not expr.name or
                    _parse_float(expr.literal) is None):
                messages.append('cannot parse attribute update {!r}'.format(
                    rule.attribute_arithmetic))

        for message in messages:
            if message is not None:
                problems.append(RuleProblem(line_no, line, message))

    return problems
