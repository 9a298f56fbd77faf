#!/usr/bin/env python3
"""
Advanced Scientific Calculator built on the exprcalc expression engine
Supports operators, functions, branches, constants and stored variables
"""

import logging
import math
import os
import re
import sys
from typing import List, Optional, Tuple

from exprcalc import ConfigError, ExpressionError, Variable
from exprcalc.impl import FloatBuilder

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# "name = expression", but not "a == b"
ASSIGNMENT = re.compile(r"^\s*([a-zA-Z][a-zA-Z0-9]*)\s*=(?!=)\s*(.+)$")


def setup_logging():
    level = os.environ.get('EXPRCALC_LOG_LEVEL', 'WARNING').upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def format_result(result: float) -> str:
    """Format output based on magnitude"""
    if not math.isfinite(result):
        return str(result)
    if abs(result) < 1e-10 and result != 0:
        return f"{result:.2e}"
    elif abs(result) > 1e10:
        return f"{result:.2e}"
    elif result == int(result):
        return str(int(result))
    return str(result)


class Calculator:
    """Main calculator interface with history and stored variables"""

    def __init__(self, builder: Optional[FloatBuilder] = None):
        self.builder = builder if builder is not None else FloatBuilder(cache_size=128)
        self.history: List[Tuple[str, float]] = []
        self.variables = {}
        self.last_result = 0.0

    def evaluate(self, expression: str) -> float:
        """Evaluate expression with stored variables and 'ans' bound"""
        built = self.builder.build(expression)

        bindings = dict(self.variables)
        bindings['ans'] = self.last_result
        result = built.evaluate(bindings)

        self.last_result = result
        self.history.append((str(built), result))
        logger.info(f"{built} = {result}")
        return result

    def set_variable(self, name: str, value: float):
        """Store a variable for later use"""
        dictionary = self.builder.dictionary
        if name == 'ans' or dictionary.has_constant(name):
            raise ConfigError(f"Cannot use reserved name: {name}")

        # the name must read back as a single variable, not e.g. "sin" + "x"
        try:
            tokens = self.builder.tokenize(name)
        except ExpressionError:
            tokens = []
        if tokens != [Variable(name)]:
            raise ConfigError(f"Cannot use reserved name: {name}")

        self.variables[name] = value

    def assign(self, line: str) -> Optional[Tuple[str, float]]:
        """Handle "name = expression"; None when the line is not an assignment"""
        match = ASSIGNMENT.match(line)
        if not match:
            return None

        name, expression = match.group(1), match.group(2)
        value = self.evaluate(expression)
        self.set_variable(name, value)
        return name, value

    def show_history(self, n: int = 10):
        """Display last n calculations"""
        for expr, result in self.history[-n:]:
            print(f"  {expr} = {format_result(result)}")

    def clear_history(self):
        """Clear calculation history"""
        self.history = []
        self.last_result = 0.0


def print_help(calc: Calculator):
    dictionary = calc.builder.dictionary

    print("\nAvailable operators:")
    print("  " + "  ".join(sorted({op.label for op in dictionary.operators()})))
    print("\nAvailable functions:")
    print("  " + "  ".join(sorted(f.label for f in dictionary.functions())))
    print("\nAvailable branches:")
    print("  " + "  ".join(sorted(b.label for b in dictionary.branches())))
    print("\nAvailable constants:")
    for name, value in sorted(dictionary.constants.items()):
        print(f"  {name} = {value}")
    print()


def print_banner():
    print("=" * 60)
    print("ADVANCED SCIENTIFIC CALCULATOR")
    print("=" * 60)
    print()
    print("Features:")
    print("  • Basic: +, -, *, /, ^, %, !")
    print("  • Comparisons: <, >, <=, >=, ==, !=")
    print("  • Functions: sin, cos, tan, ln, log(base, x), sqrt, max, etc.")
    print("  • Branches: if(cond, a, b), switch(i, a1, a2, ...)")
    print("  • Constants: pi, e")
    print("  • Variables: x = value to store, 'ans' for last result")
    print("  • Examples: 2^10, sin(pi/2), 5x, log(2, 1024), 5!")
    print()
    print("Commands:")
    print("  help     - Show this help")
    print("  vars     - Show stored variables")
    print("  history  - Show calculation history")
    print("  clear    - Clear history and variables")
    print("  quit     - Exit calculator")
    print("=" * 60)
    print()


def run_once(calc: Calculator, expressions: List[str]) -> int:
    """Evaluate command line arguments; non-zero exit status on the first error"""
    for expression in expressions:
        try:
            print(format_result(calc.evaluate(expression)))
        except ExpressionError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return 0


def main():
    setup_logging()
    calc = Calculator()

    if len(sys.argv) > 1:
        sys.exit(run_once(calc, sys.argv[1:]))

    print_banner()

    while True:
        try:
            user_input = input("calc> ").strip()

            if not user_input:
                continue

            # Handle commands
            command = user_input.lower()
            if command == 'quit':
                print("Goodbye!")
                break
            elif command == 'help':
                print_help(calc)
            elif command == 'vars':
                if calc.variables:
                    print("\nStored variables:")
                    for var, value in calc.variables.items():
                        print(f"  {var} = {format_result(value)}")
                else:
                    print("No variables stored")
                print()
            elif command == 'history':
                if calc.history:
                    print("\nRecent calculations:")
                    calc.show_history()
                else:
                    print("No history yet")
                print()
            elif command == 'clear':
                calc.clear_history()
                calc.variables = {}
                print("Cleared history and variables\n")

            # Handle variable assignment, then plain expressions
            else:
                assigned = calc.assign(user_input)
                if assigned:
                    name, value = assigned
                    print(f"{name} = {format_result(value)}\n")
                else:
                    result = calc.evaluate(user_input)
                    print(f"= {format_result(result)}\n")

        except ExpressionError as e:
            print(f"Error: {e}\n")
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break


if __name__ == "__main__":
    main()
