######################################################################
#
# lsys_engine.py
#
######################################################################
#
# String rewriting engine for parametric L-Systems, plus the engine
# object that keeps every generation around so that changing only the
# number of steps doesn't mean starting over from the axiom.
#
# One generation applies each rule in order. Every rule scans the
# generation's source string left to right for non-overlapping literal
# occurrences of its predecessor. Spans rewritten by a rule are blanked
# out with spaces in the search string, so later rules of the same
# generation neither re-match them nor see the text they were replaced
# with. Note that this differs from a textbook L-System only in the
# tie-break: where two rules could match overlapping text, the rule
# listed first wins.

import logging
import re
from collections import namedtuple

from lsys_rules import Rule, extract_brackets, spaces
from lsys_rules import matches_conditional, apply_arithmetic

logger = logging.getLogger(__name__)

# the most steps a user interface should offer; the engine itself
# doesn't enforce it
MAX_STEP_COUNT = 10

DEFAULT_AXIOM = 'F'
DEFAULT_RULE = ('F', 'F[+F]F[-F]F[/F]F[*F]')
DEFAULT_ANGLE = 15
DEFAULT_STEP_COUNT = 3

LSystemState = namedtuple('LSystemState', 'axiom, rules, angle, step_count')

WHITESPACE = re.compile(r'\s+')

######################################################################
# find every place a single rule fires in search, returning a list of
# (start, end, replacement) tuples in order. consumed marks positions
# already rewritten this generation by an earlier rule.

def _rule_matches(rule, search, consumed):

    matches = []

    if not rule.predecessor:
        return matches

    pos = search.find(rule.predecessor)

    while pos != -1:

        match_len = len(rule.predecessor)
        replacement = rule.successor
        matched = True

        # a parameter directly after the predecessor, e.g. F(i=0.1)
        if search[pos+match_len:pos+match_len+1] == '(':

            close_pos = search.find(')', pos)

            if close_pos == -1:
                matched = False
            else:
                token = search[pos:close_pos+1]
                match_len = len(token)
                attribute = extract_brackets(token)[1]

                matched = matches_conditional(attribute, rule.conditional)

                if matched and rule.attribute_arithmetic:
                    replacement += '(' + apply_arithmetic(attribute, rule) + ')'

        # never rewrite text an earlier rule already rewrote
        if matched and any(consumed[pos:pos+match_len]):
            matched = False

        if matched:
            matches.append((pos, pos + match_len, replacement))

        pos = search.find(rule.predecessor, pos + match_len)

    return matches

######################################################################
# blank out the given spans of s with spaces

def _mask(s, matches):

    pieces = []
    prev = 0

    for start, end, _ in matches:
        pieces.append(s[prev:start])
        pieces.append(spaces(end - start))
        prev = end

    pieces.append(s[prev:])

    return ''.join(pieces)

######################################################################
# produce the next generation from lstring by applying rules in order

def lsys_step(lstring, rules):

    search = lstring
    consumed = bytearray(len(lstring))
    replacements = []

    for rule in rules:

        matches = _rule_matches(rule, search, consumed)

        for start, end, _ in matches:
            consumed[start:end] = b'\x01' * (end - start)

        search = _mask(search, matches)
        replacements.extend(matches)

    replacements.sort()

    # copy untouched spans verbatim, substitute at match points
    output = []
    prev = 0

    for start, end, replacement in replacements:
        output.append(lstring[prev:start])
        output.append(replacement)
        prev = end

    output.append(lstring[prev:])

    return WHITESPACE.sub('', ''.join(output))

######################################################################
# accept Rule objects or plain (predecessor, successor) text pairs

def _compile_rules(rules):
    return [rule if isinstance(rule, Rule) else Rule(*rule)
            for rule in rules]

######################################################################

class LSystem(object):

    """An L-System together with every generation computed so far.

    results[i] is the string after i steps, so results[0] is always
    the axiom. Change the configuration through set_state(), which
    only recomputes from scratch when something other than the step
    count changed.
    """

    def __init__(self, axiom=DEFAULT_AXIOM, rules=None, angle=DEFAULT_ANGLE):

        if rules is None:
            rules = [Rule(*DEFAULT_RULE)]

        self.axiom = axiom
        self.rules = _compile_rules(rules)
        self.angle = angle

        self.results = [axiom]

        for i in range(DEFAULT_STEP_COUNT):
            self.step()

    @property
    def result(self):
        return self.results[-1] if self.results else ''

    @property
    def step_count(self):
        return len(self.results) - 1

    @property
    def state(self):
        return LSystemState(self.axiom, list(self.rules),
                            self.angle, self.step_count)

    # append one more generation to results

    def step(self):
        lstring = lsys_step(self.result, self.rules)
        self.results.append(lstring)
        logger.debug('step %d: %d symbols', self.step_count, len(lstring))
        return lstring

    def set_state(self, state):
        lsys_reconcile(self, state.axiom, state.rules,
                       state.angle, state.step_count)

    def __repr__(self):
        return 'LSystem(axiom={!r}, rules={!r}, angle={!r}, step_count={})'.format(
            self.axiom, self.rules, self.angle, self.step_count)

######################################################################
# bring lsys in line with a new configuration, reusing its history
# when only the step count changed

def lsys_reconcile(lsys, axiom, rules, angle, step_count):

    if step_count < 0:
        logger.warning('negative step count %d, using 0', step_count)
        step_count = 0

    rules = _compile_rules(rules)

    recompute = (lsys.angle != angle or
                 lsys.axiom != axiom or
                 lsys.rules != rules)

    lsys.angle = angle
    lsys.axiom = axiom
    lsys.rules = rules

    if recompute:

        logger.debug('configuration changed, recomputing %d steps', step_count)

        lsys.results = [axiom]

        for i in range(step_count):
            lsys.step()

    elif step_count != lsys.step_count:

        delta = step_count - lsys.step_count

        logger.debug('step count %d -> %d', lsys.step_count, step_count)

        for i in range(delta):
            lsys.step()

        del lsys.results[step_count+1:]
