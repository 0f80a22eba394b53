"""
AXP209 netdata collector package.

Reads power and battery telemetry from the AXP209 power-management IC on a
C.H.I.P. computer over I2C and reports it to netdata through the external
plugin text protocol on standard output.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""
