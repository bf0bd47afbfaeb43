"""Thermocouple, sensor, triac and command-parsing logic for coffee roaster controllers."""

__version__ = "0.1.0"
__all__ = ["adc", "ambient", "ds18b20", "serial_command", "triac", "typek"]