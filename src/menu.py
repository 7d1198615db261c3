"""Interactive terminal menu: Fibonacci, temperature conversion, guessing game.

The menu loops until option 4 is chosen (or input ends). Each feature reads
its own input, prints an inline message on bad input, and returns to the
menu. Input, output and the random source are injectable for tests.
"""
from __future__ import annotations
import random
from typing import Callable, Iterator, Optional

import structlog

from log_config import configure_logging

log = structlog.get_logger(__name__)

GUESS_LOW = 1
GUESS_HIGH = 10
GUESS_ATTEMPTS = 3
ATTEMPT_NAMES = {1: "first", 2: "second"}

InputFunc = Callable[[str], str]
OutputFunc = Callable[..., None]


def fibonacci(count: int) -> Iterator[int]:
    """Yield the first `count` Fibonacci numbers starting at 0."""
    a, b = 0, 1
    for _ in range(count):
        yield a
        a, b = b, a + b


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9.0 / 5.0 + 32.0


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32.0) * 5.0 / 9.0


def format_number(value: float) -> str:
    """Echo a number the way the user typed it: 100.0 -> '100', 36.6 -> '36.6'."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_number(raw: str) -> Optional[float]:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    # nan/inf parse as floats but are not temperatures
    if value != value or value in (float('inf'), float('-inf')):
        return None
    return value


def parse_count(raw: str) -> Optional[int]:
    """Parse a non-negative whole number; "+5" is accepted, "-1" and "2.5" are not."""
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


class Menu:
    def __init__(self, rng: Optional[random.Random] = None, input_func: InputFunc = input,
                 output: OutputFunc = print):
        self.rng: random.Random = rng or random.Random()
        self._input = input_func
        self._print = output

    def _read(self, prompt: str) -> str:
        self._print(prompt)
        return self._input("").strip()

    def run(self) -> None:
        """Main loop; exits on option 4, EOF or Ctrl-C."""
        try:
            while True:
                self._show_menu()
                choice = self._input("").strip()
                if choice == '1':
                    self.fibonacci()
                elif choice == '2':
                    self.convert_temperature()
                elif choice == '3':
                    self.guessing_game()
                elif choice == '4':
                    self._print("Thanks for using the application!")
                    break
                else:
                    self._print("Invalid option. Please select 1, 2, 3 or 4.")
                self._print()
        except (KeyboardInterrupt, EOFError):
            self._print()
            self._print("Interrupted. Goodbye.")

    def _show_menu(self) -> None:
        self._print("=== TERMINAL APPLICATION ===")
        self._print("1. Generate Fibonacci sequence")
        self._print("2. Temperature converter")
        self._print("3. Guessing game")
        self._print("4. Exit")
        self._print("Select an option (1-4): ")

    # -------------------- features --------------------
    def fibonacci(self) -> None:
        self._print("\n--- Fibonacci Sequence Generator ---")
        count = parse_count(self._read("How many numbers of the sequence should be generated? "))
        if count is None:
            self._print("Please enter a valid number.")
            return
        if count == 0:
            self._print("The number must be greater than 0.")
            return
        self._print(f"\nFibonacci sequence with {count} numbers:")
        for position, value in enumerate(fibonacci(count), start=1):
            self._print(f"{position}: {value}")

    def convert_temperature(self) -> None:
        self._print("\n--- Temperature Converter ---")
        self._print("1. Celsius to Fahrenheit")
        self._print("2. Fahrenheit to Celsius")
        direction = self._read("Select the conversion type (1-2): ")
        if direction == '1':
            self._convert("Celsius", "°C", "°F", celsius_to_fahrenheit)
        elif direction == '2':
            self._convert("Fahrenheit", "°F", "°C", fahrenheit_to_celsius)
        else:
            self._print("Invalid option. Please select 1 or 2.")

    def _convert(self, scale: str, unit_in: str, unit_out: str, convert: Callable[[float], float]) -> None:
        value = parse_number(self._read(f"Enter the temperature in {scale}: "))
        if value is None:
            self._print("Please enter a valid number.")
            return
        self._print(f"{format_number(value)}{unit_in} = {convert(value):.2f}{unit_out}")

    def guessing_game(self) -> None:
        self._print("\n--- Guessing Game ---")
        self._print("Welcome to the guessing game!")
        self._print(f"I have picked a number between {GUESS_LOW} and {GUESS_HIGH}.")
        self._print(f"You have {GUESS_ATTEMPTS} attempts to guess it.\n")

        secret = self.rng.randint(GUESS_LOW, GUESS_HIGH)
        log.debug("game.started", attempts=GUESS_ATTEMPTS)
        remaining = GUESS_ATTEMPTS
        while remaining > 0:
            self._print(f"Attempts remaining: {remaining}")
            raw = self._read(f"Enter your number ({GUESS_LOW}-{GUESS_HIGH}): ")
            guess = parse_count(raw)
            if guess is None:
                self._print("Please enter a valid number.")
                continue
            if not GUESS_LOW <= guess <= GUESS_HIGH:
                self._print(f"Please enter a number between {GUESS_LOW} and {GUESS_HIGH}.")
                continue
            remaining -= 1
            if guess == secret:
                used = GUESS_ATTEMPTS - remaining
                self._print(f"Congratulations! You guessed the number {secret}!")
                self._print(f"You did it on the {ATTEMPT_NAMES.get(used, 'last')} attempt!")
                return
            if remaining > 0:
                hint = "BIGGER" if guess < secret else "SMALLER"
                self._print(f"The number I picked is {hint} than {guess}.")
                self._print()
        self._print(f"Out of attempts! The number was: {secret}")
        self._print("Better luck next time!")


def main():
    configure_logging()
    Menu().run()

if __name__ == "__main__":
    main()
