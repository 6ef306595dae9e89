"""End-to-end tests for the run controller."""

import pytest

from word_runner.components import Position, Target
from word_runner.entities import create_hostile, create_powerup
from word_runner.components import PowerKind
from word_runner.errors import SubmissionFailed
from word_runner.game import (
    RunController, PHASE_LOBBY, PHASE_PLAYING, PHASE_GAME_OVER,
    SAVE_PENDING, SAVE_DONE, SAVE_FAILED, SAVE_LOGIN_REQUIRED,
)
from word_runner.session import Difficulty
from word_runner.words import WordPool

from conftest import FakeSubmitter


def _place(controller, word, x):
    return create_hostile(controller.world, word, x, 300, 1.0)


def test_starts_in_lobby(controller):
    assert controller.phase == PHASE_LOBBY
    assert controller.console[-1].startswith('> WORD_LIST_LOADED')


def test_lobby_tick_is_inert(controller):
    controller.tick(10000)
    assert controller.world.count(Target) == 0
    assert controller.submit_text('CAT') is None


def test_first_hostile_typed_end_to_end(easy_run):
    easy_run.tick(2600)
    targets = easy_run.live_targets()
    assert [t.text for t in targets] == ['CAT']

    result = easy_run.submit_text('cat')

    session = easy_run.session
    assert result.matched
    assert session.score == 100
    assert session.combo == 1
    assert session.base_speed_multiplier == pytest.approx(1.015)
    assert session.spawn_interval_ms == 2495
    assert easy_run.live_targets() == []
    assert easy_run.console[-1] == '> CLEARED: CAT'


def test_miss_is_logged(easy_run):
    easy_run.submit_text('zebra')
    assert easy_run.console[-1] == '> UNKNOWN_SIG: ZEBRA'


def test_targets_scroll_at_run_speed(easy_run):
    entity_id = _place(easy_run, 'CAT', 500)
    easy_run.session.speed_multiplier = 2.0

    easy_run.tick(16)

    assert easy_run.world.get_component(entity_id, Position).x == pytest.approx(498)


def test_crossing_the_line_costs_health_and_combo(easy_run):
    _place(easy_run, 'CAT', 120.5)
    easy_run.session.combo = 4

    easy_run.tick(16)

    assert easy_run.session.health == 75
    assert easy_run.session.combo == 0
    assert easy_run.live_targets() == []
    assert easy_run.damage_flash > 0
    assert easy_run.phase == PHASE_PLAYING


def test_powerup_crossing_also_damages(easy_run):
    create_powerup(easy_run.world, PowerKind.HEAL, 121, 300, 1.5)
    easy_run.tick(16)
    assert easy_run.session.health == 75


def test_game_over_fires_once_and_freezes(easy_run, submitter):
    for i in range(5):
        _place(easy_run, f'W{i}X', 100 + i)

    easy_run.tick(16)

    assert easy_run.phase == PHASE_GAME_OVER
    assert easy_run.session.health == 0
    assert easy_run.game_overs == 1
    # The fifth word was never processed
    assert len(easy_run.live_targets()) == 1
    assert len(submitter.summaries) == 1

    frozen_x = easy_run.world.get_component(
        next(eid for eid, _ in easy_run.world.query(Target)), Position
    ).x
    easy_run.tick(5000)
    easy_run.tick(30000)

    assert easy_run.game_overs == 1
    assert len(submitter.summaries) == 1
    assert easy_run.submit_text('W4X') is None
    eid = next(eid for eid, _ in easy_run.world.query(Target))
    assert easy_run.world.get_component(eid, Position).x == frozen_x


def test_submission_payload(easy_run, submitter):
    easy_run.tick(2600)
    easy_run.submit_text('CAT')
    for i in range(4):
        _place(easy_run, f'W{i}X', 100)
    easy_run.tick(2700)

    summary = submitter.summaries[0]
    assert summary.to_payload() == {
        'score': 100, 'difficulty': 'EASY', 'wordsTyped': ['CAT'],
    }
    assert easy_run.save_status == SAVE_PENDING


def _die(controller):
    for i in range(4):
        _place(controller, f'W{i}X', 100)
    controller.tick(controller.now_ms + 16)
    assert controller.phase == PHASE_GAME_OVER


def test_successful_save_awards_points(easy_run, submitter):
    _die(easy_run)
    submitter.futures[0].set_result(40)

    easy_run.tick(easy_run.now_ms + 16)

    assert easy_run.save_status == SAVE_DONE
    assert easy_run.points == 40
    assert easy_run.last_points_awarded == 40
    assert easy_run.console[-1] == '> RANKING_SAVED. POINTS_EARNED: +40'


def test_failed_save_is_advisory(easy_run, submitter):
    _die(easy_run)
    submitter.futures[0].set_exception(SubmissionFailed('Unauthorized', 401))

    easy_run.tick(easy_run.now_ms + 16)

    assert easy_run.save_status == SAVE_FAILED
    assert easy_run.points == 0
    assert easy_run.phase == PHASE_GAME_OVER
    assert any('SAVE_FAILED' in n.text for n in easy_run.notices)


def test_unexpected_submission_error_is_advisory(easy_run, submitter):
    _die(easy_run)
    submitter.futures[0].set_exception(RuntimeError('worker blew up'))

    easy_run.tick(easy_run.now_ms + 16)
    easy_run.tick(easy_run.now_ms + 16)

    assert easy_run.save_status == SAVE_FAILED
    assert any('SAVE_FAILED: RuntimeError' in n.text for n in easy_run.notices)


def test_cancelled_submission_is_advisory(easy_run, submitter):
    _die(easy_run)
    assert submitter.futures[0].cancel()

    easy_run.tick(easy_run.now_ms + 16)

    assert easy_run.save_status == SAVE_FAILED
    assert easy_run.points == 0


def test_uploads_from_earlier_runs_still_pay_out(easy_run, submitter):
    _die(easy_run)
    easy_run.return_to_lobby()
    easy_run.start_game(Difficulty.EASY)
    _die(easy_run)
    assert len(submitter.futures) == 2

    submitter.futures[1].set_result(30)
    easy_run.tick(easy_run.now_ms + 16)
    assert easy_run.save_status == SAVE_DONE
    assert easy_run.last_points_awarded == 30

    # The first run's upload lands late: points count, status stays put
    submitter.futures[0].set_exception(SubmissionFailed('timeout'))
    easy_run.tick(easy_run.now_ms + 16)
    assert easy_run.save_status == SAVE_DONE

    easy_run.return_to_lobby()
    easy_run.start_game(Difficulty.EASY)
    _die(easy_run)
    submitter.futures[2].set_result(5)
    easy_run.tick(easy_run.now_ms + 16)

    assert easy_run.points == 35


def test_late_upload_does_not_touch_new_run_status(easy_run, submitter):
    _die(easy_run)
    easy_run.return_to_lobby()
    easy_run.start_game(Difficulty.MEDIUM)

    submitter.futures[0].set_result(12)
    easy_run.tick(easy_run.now_ms + 16)

    assert easy_run.save_status is None
    assert easy_run.last_points_awarded == 0
    assert easy_run.points == 12


def test_guest_is_prompted_to_log_in(word_pool, seeded_rng):
    submitter = FakeSubmitter(authenticated=False)
    controller = RunController(word_pool, submitter=submitter, rng=seeded_rng)
    controller.start_game(Difficulty.EASY)

    _die(controller)

    assert controller.save_status == SAVE_LOGIN_REQUIRED
    assert submitter.summaries == []
    assert 'PROMPT: ACCOUNT_LOGIN_REQUIRED_FOR_PERSISTENCE.' in controller.console[-2]


def test_no_submitter_means_guest(word_pool):
    controller = RunController(word_pool)
    controller.start_game('medium')
    _die(controller)
    assert controller.save_status == SAVE_LOGIN_REQUIRED


def test_restart_resets_everything(easy_run):
    create_powerup(easy_run.world, PowerKind.SLOW, 500, 300, 1.5)
    easy_run.submit_text('_SLOW')
    _place(easy_run, 'DOG', 600)
    easy_run.session.damage(50)
    assert easy_run.session.slow_mode_active

    easy_run.start_game(Difficulty.HARD)

    session = easy_run.session
    assert session.health == 100
    assert session.score == 0
    assert session.combo == 0
    assert not session.slow_mode_active
    assert session.speed_multiplier == pytest.approx(1.35)
    assert easy_run.live_targets() == []
    assert easy_run.slow_remaining_ms() == 0

    # The cancelled reversion never fires into the new run
    easy_run.tick(9000)
    assert not any('RESTORED' in n.text for n in easy_run.notices)


def test_slow_powerup_through_the_controller(easy_run):
    easy_run.tick(100)
    create_powerup(easy_run.world, PowerKind.SLOW, 500, 300, 1.5)

    easy_run.submit_text('_slow')

    assert easy_run.session.speed_multiplier == pytest.approx(0.4)
    assert easy_run.console[-2] == '> POWERUP_ACTIVE: SLOW'
    assert easy_run.notices[-1].text == 'SYS_MSG: OS_CORE: CLOCK_CYCLES_REDUCED'

    easy_run.tick(8099)
    assert easy_run.session.slow_mode_active
    easy_run.tick(8100)
    assert not easy_run.session.slow_mode_active
    assert easy_run.notices[-1].text == 'SYS_MSG: OS_CORE: CLOCK_CYCLES_RESTORED'


def test_notices_expire(easy_run):
    easy_run.notify('HELLO')
    easy_run.tick(3999)
    assert easy_run.notices
    easy_run.tick(4000)
    assert easy_run.notices == []


def test_return_to_lobby_only_from_game_over(easy_run):
    easy_run.return_to_lobby()
    assert easy_run.phase == PHASE_PLAYING
    _die(easy_run)
    easy_run.return_to_lobby()
    assert easy_run.phase == PHASE_LOBBY


def test_empty_pool_keeps_the_loop_alive(seeded_rng):
    controller = RunController(WordPool.empty(), rng=seeded_rng)
    assert controller.console[-1] == '> CRITICAL_ERROR: WORD_LIST_UNSPECIFIED.'
    controller.start_game(Difficulty.EASY)

    for now in range(0, 10000, 16):
        controller.tick(now)

    assert controller.phase == PHASE_PLAYING
    hostiles = [t for t in controller.live_targets() if not t.is_powerup]
    assert hostiles == []
