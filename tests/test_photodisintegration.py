"""Interaction selection, execution and energy loss length."""

import math

import pytest
import torch

from conftest import FixedRandomSource, constant_table, make_candidate
from MCPhotoDisintegration.core.data_models import (
    Candidate,
    DisintegrationChannel,
    ParticleState,
    PendingInteraction,
    nucleus_id,
    nucleus_mass,
)
from MCPhotoDisintegration.physics.constants import C_SQUARED, EV, LG_MAX, LG_MIN, MPC, RATE_SAMPLES
from MCPhotoDisintegration.physics.photodisintegration import PhotoDisintegration
from MCPhotoDisintegration.physics.photon_field import PhotonField
from MCPhotoDisintegration.physics.rate_table import RateTable
from MCPhotoDisintegration.physics_data_preparation.rate_table_generator import DEFAULT_CHANNELS
from MCPhotoDisintegration.utils.validation import InteractionStateError


RATE = 1.0 / MPC  # one interaction per Mpc


def module_for(table, draws=(), photon_field=PhotonField.CMB):
    return PhotoDisintegration(
        photon_field, rate_table=table, random_source=FixedRandomSource(draws)
    )


@pytest.fixture
def iron_table():
    return constant_table({(26, 30): [(100000, RATE), (10000, 2 * RATE)]})


def ramp_table(code=100000):
    """Iron table whose single channel rate grows linearly with lg: RATE * lg."""
    lg = torch.linspace(LG_MIN, LG_MAX, RATE_SAMPLES, dtype=torch.float64)
    return RateTable({(26, 30): [(code, RATE * lg)]}, source='memory')


class TestSelection:

    def test_no_channels_means_no_interaction(self, iron_table):
        module = module_for(iron_table)
        candidate = make_candidate(55, 26, gamma=1e10)
        assert module.set_next_interaction(candidate) is None
        assert module.random_source.requests == []

    @pytest.mark.parametrize("gamma", [1e6, 1e14, 1e5, 1e15])
    def test_energy_outside_open_range_means_no_interaction(self, iron_table, gamma):
        module = module_for(iron_table)
        candidate = make_candidate(56, 26, gamma=gamma)
        assert module.set_next_interaction(candidate) is None
        assert candidate.get_interaction_state(module.description) is None

    @pytest.mark.parametrize("lg", [6.0001, 13.9999])
    def test_energy_just_inside_range_interacts(self, iron_table, lg):
        module = module_for(iron_table, [0.5, 0.5])
        candidate = make_candidate(56, 26, gamma=10 ** lg)
        assert module.set_next_interaction(candidate) is not None

    def test_zero_energy_means_no_interaction(self, iron_table):
        module = module_for(iron_table)
        assert module.set_next_interaction(make_candidate(56, 26, gamma=0.0)) is None

        at_rest = Candidate(current=ParticleState(id=nucleus_id(56, 26), energy=0.0))
        assert module.set_next_interaction(at_rest) is None
        assert module.random_source.requests == []

    def test_redshift_boost_moves_energy_out_of_range(self, iron_table):
        module = module_for(iron_table, [0.5, 0.5])
        assert module.set_next_interaction(make_candidate(56, 26, 10 ** 13.9)) is not None
        assert module.set_next_interaction(make_candidate(56, 26, 10 ** 13.9, redshift=0.5)) is None

    def test_shortest_sampled_distance_wins(self, iron_table):
        module = module_for(iron_table, [0.5, 0.5])
        candidate = make_candidate(56, 26, gamma=1e10)

        interaction = module.set_next_interaction(candidate)

        assert interaction.channel == 10000
        assert interaction.distance == pytest.approx(math.log(2) * MPC / 2)
        assert candidate.get_interaction_state(module.description) is interaction
        assert module.random_source.requests == [2]

    def test_lower_rate_channel_wins_with_larger_draw(self, iron_table):
        module = module_for(iron_table, [0.9, 0.1])
        interaction = module.set_next_interaction(make_candidate(56, 26, gamma=1e10))
        assert interaction.channel == 100000
        assert interaction.distance == pytest.approx(-math.log(0.9) * MPC)

    def test_tie_keeps_first_channel(self):
        table = constant_table({(26, 30): [(100000, RATE), (10000, RATE)]})
        module = module_for(table, [0.25, 0.25])
        interaction = module.set_next_interaction(make_candidate(56, 26, gamma=1e10))
        assert interaction.channel == 100000

    def test_zero_rate_channel_never_selected(self):
        table = constant_table({(26, 30): [(100000, 0.0), (10000, RATE)]})
        module = module_for(table, [1e-300, 0.999])
        assert module.set_next_interaction(make_candidate(56, 26, 1e10)).channel == 10000

        silent = module_for(constant_table({(26, 30): [(100000, 0.0)]}), [0.5])
        assert silent.set_next_interaction(make_candidate(56, 26, 1e10)) is None

    def test_one_draw_per_channel_per_call(self):
        table = constant_table({(26, 30): [(100000, RATE), (10000, RATE), (1, RATE)]})
        module = module_for(table, [0.5] * 6)
        module.set_next_interaction(make_candidate(56, 26, 1e10))
        module.set_next_interaction(make_candidate(56, 26, 1e10))
        assert module.random_source.requests == [3, 3]

    def test_redshift_scales_distance(self, iron_table):
        base = module_for(iron_table, [0.5, 0.5]).set_next_interaction(
            make_candidate(56, 26, 1e10))
        for z in (0.5, 1.0, 3.0):
            scaled = module_for(iron_table, [0.5, 0.5]).set_next_interaction(
                make_candidate(56, 26, 1e10, redshift=z))
            # comoving distance ~ (1+z) / (1+z)^3 for a flat rate curve
            assert scaled.distance == pytest.approx(base.distance / (1 + z) ** 2)
            assert scaled.distance < base.distance

    def test_rate_curve_read_at_boosted_energy(self):
        module = module_for(ramp_table(), [math.exp(-1)])
        z = 1.0

        interaction = module.set_next_interaction(make_candidate(56, 26, 1e10, redshift=z))

        lg = 10 + math.log10(1 + z)
        expected = MPC / lg / (1 + z) ** 3 * (1 + z)
        assert interaction.distance == pytest.approx(expected, rel=1e-9)

    def test_irb_scaling_and_exhausted_background(self, iron_table):
        module = module_for(iron_table, [0.5] * 4, photon_field=PhotonField.IRB)
        base = math.log(2) * MPC / 2

        interaction = module.set_next_interaction(make_candidate(56, 26, 1e10, redshift=1.0))
        assert interaction.distance == pytest.approx(base * 2 / 5.1980)

        assert module.set_next_interaction(make_candidate(56, 26, 1e10, redshift=6.0)) is None


class TestExecution:

    @staticmethod
    def pending(candidate, module, channel):
        candidate.set_interaction_state(
            module.description, PendingInteraction(distance=1.0, channel=channel)
        )

    def test_iron_loses_one_proton(self):
        module = module_for(RateTable())
        energy = 1e20 * EV
        candidate = Candidate(current=ParticleState(nucleus_id(56, 26), energy))
        self.pending(candidate, module, 10000)

        secondaries = module.perform_interaction(candidate)

        assert candidate.active
        assert candidate.current.mass_number == 55
        assert candidate.current.charge_number == 25
        assert candidate.current.energy == pytest.approx(55 * energy / 56)
        assert [s.id for s in secondaries] == [nucleus_id(1, 1)]
        assert secondaries[0].energy == pytest.approx(energy / 56)
        assert candidate.current.energy + secondaries[0].energy == pytest.approx(energy, rel=1e-14)
        assert candidate.interaction_states == {}

    @pytest.mark.parametrize("A, Z, code", [(A, Z, code) for A, Z, code, _ in DEFAULT_CHANNELS]
                             + [(56, 26, 321011), (30, 14, 111111)])
    def test_nucleons_charge_and_energy_conserved(self, A, Z, code):
        module = module_for(RateTable())
        energy = 3.2e19 * EV
        candidate = Candidate(current=ParticleState(nucleus_id(A, Z), energy))
        self.pending(candidate, module, code)

        secondaries = module.perform_interaction(candidate)

        remnant_A = candidate.current.mass_number if candidate.active else 0
        remnant_Z = candidate.current.charge_number if candidate.active else 0
        remnant_E = candidate.current.energy if candidate.active else 0.0
        assert remnant_A + sum(s.mass_number for s in secondaries) == A
        assert remnant_Z + sum(s.charge_number for s in secondaries) == Z
        assert remnant_E + sum(s.energy for s in secondaries) == pytest.approx(energy, rel=1e-12)
        assert len(secondaries) == sum(DisintegrationChannel.from_code(code).counts())

    def test_secondaries_in_species_order_with_energy_per_nucleon(self):
        module = module_for(RateTable())
        candidate = Candidate(current=ParticleState(nucleus_id(56, 26), 56.0))
        self.pending(candidate, module, 111111)

        secondaries = module.perform_interaction(candidate)

        assert [(s.mass_number, s.charge_number) for s in secondaries] == \
            [(1, 0), (1, 1), (2, 1), (3, 1), (3, 2), (4, 2)]
        assert [s.energy for s in secondaries] == [1.0, 1.0, 2.0, 3.0, 3.0, 4.0]
        assert candidate.secondaries == secondaries

    def test_fully_consumed_nucleus_is_deactivated(self):
        module = module_for(RateTable())
        candidate = Candidate(current=ParticleState(nucleus_id(4, 2), 8.0))
        self.pending(candidate, module, 100010)

        secondaries = module.perform_interaction(candidate)

        assert not candidate.active
        assert candidate.current.id == nucleus_id(4, 2)
        assert [(s.mass_number, s.energy) for s in secondaries] == [(1, 2.0), (3, 6.0)]

    def test_perform_without_pending_interaction(self):
        module = module_for(RateTable())
        candidate = Candidate(current=ParticleState(nucleus_id(56, 26), 1.0))
        with pytest.raises(InteractionStateError):
            module.perform_interaction(candidate)

    def test_selected_interaction_is_consumed(self, iron_table):
        module = module_for(iron_table, [0.5, 0.5])
        state = ParticleState(nucleus_id(56, 26), 0.0)
        state.energy = 1e10 * nucleus_mass(state.id) * C_SQUARED
        candidate = Candidate(current=state)

        interaction = module.set_next_interaction(candidate)
        module.perform_interaction(candidate)

        assert interaction.channel == 10000
        assert candidate.current.id == nucleus_id(55, 25)
        assert candidate.get_interaction_state(module.description) is None


class TestEnergyLossLength:

    def energy_at(self, A, Z, lg):
        return 10 ** lg * nucleus_mass(nucleus_id(A, Z)) * C_SQUARED

    def test_weighted_inverse_rate(self):
        table = constant_table({(26, 30): [(100000, RATE), (1, 3 * RATE)]})
        module = module_for(table)
        particle_id = nucleus_id(56, 26)

        length = module.energy_loss_length(particle_id, self.energy_at(56, 26, 10.0))

        assert length == pytest.approx(1.0 / (RATE / 56 + 3 * RATE * 4 / 56))
        assert module.random_source.requests == []

    def test_infinite_without_channels_or_outside_range(self, iron_table):
        module = module_for(iron_table)
        assert module.energy_loss_length(nucleus_id(12, 6), self.energy_at(12, 6, 10.0)) == math.inf
        assert module.energy_loss_length(nucleus_id(56, 26), self.energy_at(56, 26, 5.0)) == math.inf
        assert module.energy_loss_length(nucleus_id(56, 26), self.energy_at(56, 26, 14.5)) == math.inf

    def test_zero_energy_is_infinite(self, iron_table):
        module = module_for(iron_table)
        assert module.energy_loss_length(nucleus_id(56, 26), 0.0) == math.inf
        assert module.energy_loss_length(nucleus_id(56, 26), -1.0) == math.inf

    def test_loss_length_follows_rate_curve(self):
        module = module_for(ramp_table())
        length = module.energy_loss_length(nucleus_id(56, 26), self.energy_at(56, 26, 10.5))
        assert length == pytest.approx(56 / (10.5 * RATE), rel=1e-9)

    def test_tabulated_lengths(self, iron_table):
        module = module_for(iron_table)
        energies = [self.energy_at(56, 26, lg) for lg in (5.0, 8.0, 12.0)]
        lengths = module.energy_loss_lengths(nucleus_id(56, 26), energies)
        assert lengths.shape == (3,)
        assert math.isinf(lengths[0])
        assert lengths[1] == pytest.approx(56 / (3 * RATE))
        assert lengths[2] == pytest.approx(lengths[1])
