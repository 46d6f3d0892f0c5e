"""
succession_services -- imperative shell over the pure engines.

Usage:
    from succession_services import SuccessionService

    report = SuccessionService().calculate(heirs, rules)
"""

from succession_services.succession_service import SuccessionReport, SuccessionService

__all__ = ["SuccessionReport", "SuccessionService"]
