"""Shared test fixtures for gherkin_engine tests."""

import io

import pytest
from rich.console import Console

from gherkin_engine import EngineConfig
from gherkin_engine.config import WriterConfig


@pytest.fixture
def login_source() -> str:
    """Return the minimal one-scenario feature."""
    return """Feature: Login
  Scenario: OK
    Given a user
    When they log in
    Then they see the dashboard
"""


@pytest.fixture
def full_source() -> str:
    """Return a feature using every construct the grammar knows."""
    return '''# Account management
@accounts @smoke
Feature: Accounts
  Users manage their own accounts.

  Background:
    Given the service is running

  @happy
  Scenario: Create account
    Given no account for "alice"
    When she signs up with:
      | field | value     |
      | email | a@x.io    |
      | pipe  | a \\| b    |
    Then the welcome mail contains
      """text/plain
      Welcome, alice!
      """

  Rule: Closing accounts
    Scenario Outline: Close with <reason>
      Given an account closed for <reason>
      # retention depends on reason
      Then data is kept <days> days

      @fast
      Examples: common
        | reason | days |
        | fraud  | 365  |
        | user   | 30   |
'''


@pytest.fixture
def french_source() -> str:
    """Return a feature written in the French dialect."""
    return """# language: fr
Fonctionnalité: Connexion
  Scénario: ok
    Soit un utilisateur
    Et qu'il se connecte
    Alors il voit le tableau de bord
"""


@pytest.fixture
def config() -> EngineConfig:
    """Create a default engine configuration."""
    return EngineConfig()


@pytest.fixture
def wide_config() -> EngineConfig:
    """Create a configuration indenting four spaces per level."""
    return EngineConfig(writer=WriterConfig(indent=4))


@pytest.fixture
def console_output() -> tuple[Console, io.StringIO]:
    """Create a plain-text console writing to a buffer."""
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, width=200)
    return console, output
