"""LuxPulse: facilities monitoring for commercial lighting estates."""
