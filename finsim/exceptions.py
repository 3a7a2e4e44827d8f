"""
Custom exceptions for FinSim.

Purpose
-------
Provides a unified exception hierarchy for the few places FinSim raises.
The simulation engine itself never raises on validated input: division by
zero income or expenses yields sentinel values instead. Exceptions belong
to the caller-side layers (request validation, saved scenarios, misuse of
the API such as an unknown strategy name).

Exception Hierarchy
-------------------
FinSimError (base)
├── ConfigurationError - Unknown strategy / risk profile, bad settings
└── ValidationError - Caller-side validation failures
    └── ScenarioError - Saved-scenario envelope violations

Usage
-----
>>> from finsim.exceptions import ScenarioError
>>>
>>> try:
...     build_scenario(name="", scenario_type="debt-payoff", parameters={})
... except FinSimError as e:
...     print(f"FinSim error: {e}")
"""


class FinSimError(Exception):
    """
    Base exception for all FinSim errors.

    Examples
    --------
    >>> try:
    ...     simulate_payoff(debts, strategy="random")
    ... except FinSimError as e:
    ...     logger.error(f"Payoff failed: {e}")
    """
    pass


class ConfigurationError(FinSimError):
    """
    Invalid configuration or parameters.

    Raised when the API is called with an option it does not know:
    - Strategy other than "avalanche" / "snowball"
    - Risk profile name that does not exist

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "strategy must be one of ('avalanche', 'snowball'), got 'random'."
    ... )
    """
    pass


class ValidationError(FinSimError):
    """
    Caller-side validation failures.

    The engine trusts its inputs; this error is raised by the layers that
    prepare those inputs (request models, deserializers).
    """
    pass


class ScenarioError(ValidationError):
    """
    Saved-scenario envelope violations.

    Raised when a scenario to persist is malformed:
    - Missing or oversized name / description
    - Unknown scenario type
    - Parameters missing or JSON payload above the size limit

    Examples
    --------
    >>> raise ScenarioError("parameters payload too large")
    """
    pass
