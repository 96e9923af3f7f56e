"""Components for dipole trapping with far-detuned laser light."""

from __future__ import annotations

from dataclasses import dataclass

from . import constant


@dataclass(frozen=True)
class DipoleLight:
    """Marks a laser beam as dipole-trapping light."""

    #: Wavelength of the light, metres.
    wavelength: float

    def frequency(self) -> float:
        """Frequency of the light, Hz."""
        return constant.C / self.wavelength

    def wavenumber(self) -> float:
        """Wavenumber of the light, rad/m."""
        return 2.0 * constant.PI / self.wavelength


@dataclass(frozen=True)
class Polarizability:
    """How strongly an atom is pulled along an intensity gradient.

    The force on the atom is ``prefactor * intensity_gradient``, with the
    gradient in W/m^3 and the force in N.
    """

    prefactor: float

    @classmethod
    def calculate_for(
        cls,
        dipole_beam_wavelength: float,
        optical_transition_wavelength: float,
        optical_transition_linewidth: float,
    ) -> "Polarizability":
        """Polarizability in a dipole beam detuned from a strong optical transition.

        Wavelengths are in metres, the linewidth in Hz.
        """
        transition_f = constant.C / optical_transition_wavelength
        dipole_f = constant.C / dipole_beam_wavelength
        prefactor = (
            -3.0
            * constant.PI
            * constant.C**2
            / (2.0 * (2.0 * constant.PI * transition_f) ** 3)
            * optical_transition_linewidth
            * -(1.0 / (transition_f - dipole_f) + 1.0 / (transition_f + dipole_f))
        )
        return cls(prefactor=prefactor)