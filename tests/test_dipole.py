import math

import pytest

from coldatoms import constant
from coldatoms.dipole import DipoleLight, Polarizability


@pytest.mark.parametrize("wavelength", [1064.0e-9, 532.0e-9, 1.55e-6])
def test_frequency_times_wavelength_is_speed_of_light(wavelength):
    light = DipoleLight(wavelength=wavelength)
    assert light.frequency() * wavelength == pytest.approx(constant.C)


@pytest.mark.parametrize("wavelength", [1064.0e-9, 532.0e-9])
def test_wavenumber_times_wavelength_is_two_pi(wavelength):
    light = DipoleLight(wavelength=wavelength)
    assert light.wavenumber() * wavelength == pytest.approx(2.0 * math.pi)


def test_force_from_polarizability_matches_known_values():
    polarizability = Polarizability.calculate_for(1064e-9, 461e-9, 32e6)
    gradient_y = -4.33992902e13
    force_y = polarizability.prefactor * gradient_y
    assert force_y == pytest.approx(-3.11151847e-23, abs=2e-24)


def test_red_detuned_light_attracts():
    polarizability = Polarizability.calculate_for(1064e-9, 461e-9, 32e6)
    assert polarizability.prefactor > 0.0


def test_blue_detuned_light_repels():
    polarizability = Polarizability.calculate_for(400e-9, 461e-9, 32e6)
    assert polarizability.prefactor < 0.0


def test_prefactor_scales_with_linewidth():
    single = Polarizability.calculate_for(1064e-9, 461e-9, 32e6)
    double = Polarizability.calculate_for(1064e-9, 461e-9, 64e6)
    assert double.prefactor == pytest.approx(2.0 * single.prefactor)


def test_prefactor_grows_closer_to_resonance():
    far = Polarizability.calculate_for(1064e-9, 461e-9, 32e6)
    near = Polarizability.calculate_for(500e-9, 461e-9, 32e6)
    assert near.prefactor > far.prefactor