"""Tests for submitted-line processing, suggestions and tab completion."""

from dataclasses import replace

import pytest

from bash_quest.components import Tier
from bash_quest.filesystem import path_string
from bash_quest.shell import (
    ALREADY_AT_ROOT, SCORE_BY_TIER, command_not_found, complete,
    directory_not_found, generate_suggestions, missing_destination,
    process_input, resolve_path_variable, unknown_path_variable, update_input,
)


def with_enemies(state, *enemies, **changes):
    return replace(state, enemies=tuple(enemies), **changes)


# =============================================================================
# Enemy matching and score
# =============================================================================

class TestEnemyMatching:

    def test_beginner_kill_scores_ten(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'))
        after = process_input('echo', state)
        assert after.score == 10
        assert not after.enemies[0].active
        assert after.last_command_description == 'Display a line of text'
        assert after.particles

    def test_pro_kill_scores_fifty(self, started, make_enemy):
        state = with_enemies(started, make_enemy('tar', filename='backup.sh'), tier=Tier.PRO)
        assert process_input('tar backup.sh', state).score == 50

    def test_boss_scores_every_step(self, started, make_boss):
        state = with_enemies(started, make_boss('chmod', 'find', 'sed'), tier=Tier.ADVANCED)
        for command, expected in (('chmod', 30), ('find', 60), ('sed', 90)):
            state = process_input(command, state)
            assert state.score == expected
        boss = state.enemies[0]
        assert not boss.active
        assert boss.sequence_index == 3

    def test_boss_wrong_step_does_not_advance(self, started, make_boss):
        state = with_enemies(started, make_boss('chmod', 'find', 'sed'), tier=Tier.ADVANCED)
        after = process_input('find', state)
        assert after.enemies[0].sequence_index == 0
        assert after.last_error == command_not_found('find')

    def test_reprocessing_does_not_rescore(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'))
        once = process_input('echo', state)
        twice = process_input('echo', once)
        assert twice.score == once.score == 10
        assert twice.last_error == command_not_found('echo')

    def test_first_match_only(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'), make_enemy('echo'))
        after = process_input('echo', state)
        assert [e.active for e in after.enemies] == [False, True]
        assert after.score == 10

    def test_cat_resume_scenario(self, started, make_enemy):
        other = make_enemy('cat', filename='report.docx')
        target = make_enemy('cat', filename='resume.pdf')
        after = process_input('cat resume.pdf', with_enemies(started, other, target))
        assert [e.active for e in after.enemies] == [True, False]

    def test_no_match(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'),
                             current_input='ehco', target_enemy='enemy-1')
        after = process_input('  ehco ', state)
        assert after.last_error == 'Command not found:   ehco '
        assert after.current_input == ''
        assert after.target_enemy is None
        assert after.score == 0

    def test_success_clears_previous_error(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'), last_error='old')
        assert process_input('echo', state).last_error is None


# =============================================================================
# Turrets
# =============================================================================

class TestTurrets:

    def test_toggle(self, started):
        on = process_input('turrets on', started)
        assert on.turrets_enabled
        off = process_input('turrets off', on)
        assert not off.turrets_enabled

    def test_already_on_falls_through(self, started):
        on = process_input('turrets on', started)
        again = process_input('turrets on', on)
        assert again.turrets_enabled
        assert again.last_error == command_not_found('turrets on')


# =============================================================================
# File-system commands
# =============================================================================

class TestFileSystemCommands:

    def test_cd_changes_directory(self, started):
        after = process_input('cd home', started)
        assert path_string(after.file_system) == '/home'
        assert after.last_command_description == 'Changed directory to /home'
        assert after.current_input == ''

    def test_cd_up_at_root(self, started):
        after = process_input('cd ..', started)
        assert after.last_error == ALREADY_AT_ROOT
        assert after.file_system.current_path == ()

    def test_cd_missing(self, started):
        after = process_input('cd nowhere', started)
        assert after.last_error == directory_not_found('nowhere')

    def test_ls_marks_explored_and_lists(self, started):
        state = process_input('cd etc', started)
        after = process_input('ls', state)
        assert '/etc' in after.file_system.explored
        assert after.last_command_description.startswith('Contents of /etc: - settings.json')

    def test_ls_question_mark(self, started):
        after = process_input('ls?', started)
        assert after.last_command_description.startswith('Contents of /: d home')

    def test_pwd(self, started):
        state = process_input('cd var', started)
        after = process_input('pwd', state)
        assert after.last_command_description == 'Current directory: /var'

    def test_step_navigation(self, started):
        after = process_input('In /root rmv home?', started)
        assert path_string(after.file_system) == '/home'

    def test_successful_cd_defeats_cd_enemy(self, started, make_enemy):
        state = with_enemies(started, make_enemy('cd', filename='projects'))
        after = process_input('cd home', state)
        assert not after.enemies[0].active
        assert after.score == 10
        assert after.last_error is None
        assert path_string(after.file_system) == '/home'
        assert after.last_command_description == 'Changed directory to /home'

    @pytest.mark.parametrize('line, error', [
        ('cd ..', ALREADY_AT_ROOT),
        ('cd nowhere', directory_not_found('nowhere')),
        ('cd projects', directory_not_found('projects')),
    ])
    def test_failed_cd_never_scores(self, started, make_enemy, line, error):
        state = with_enemies(started, make_enemy('cd', filename='projects'))
        after = process_input(line, state)
        assert after.last_error == error
        assert after.enemies[0].active
        assert after.score == 0
        assert after.particles == ()

    def test_ls_defeats_ls_enemy(self, started, make_enemy):
        state = with_enemies(started, make_enemy('ls', filename='ls'))
        assert not process_input('ls', state).enemies[0].active


# =============================================================================
# PATH variables and destinations
# =============================================================================

class TestPathVariables:

    def test_export_creates_variable(self, started):
        after = process_input('export TRASH=/trash', started)
        assert resolve_path_variable(after, 'TRASH') == '/trash'
        assert not after.show_path_tutorial
        assert after.last_command_description == 'Created PATH variable: TRASH=/trash'

    def test_export_updates_in_place(self, started):
        state = process_input('export A=/a', started)
        state = process_input('export B=/b', state)
        state = process_input('export A=/z', state)
        assert [(v.name, v.path) for v in state.path_variables] == [('A', '/z'), ('B', '/b')]

    @pytest.mark.parametrize('line', ['export TRASH', 'export A=b=c'])
    def test_malformed_export_falls_through(self, started, line):
        after = process_input(line, started)
        assert after.path_variables == ()
        assert after.last_error == command_not_found(line)

    def test_export_with_empty_name(self, started):
        after = process_input('export =/x', started)
        assert resolve_path_variable(after, '') == '/x'
        assert after.last_error is None

    def test_mv_with_known_variable(self, started, make_enemy):
        state = process_input('export TRASH=/trash', started)
        state = with_enemies(state, make_enemy('mv', filename='file.txt'), tier=Tier.INTERMEDIATE)
        after = process_input('mv file.txt $TRASH', state)
        assert after.last_error is None
        assert not after.enemies[0].active
        assert after.score == SCORE_BY_TIER[Tier.INTERMEDIATE]

    def test_mv_with_unknown_variable(self, started, make_enemy):
        state = with_enemies(started, make_enemy('mv', filename='file.txt'),
                             current_input='mv file.txt $MISSING')
        after = process_input('mv file.txt $MISSING', state)
        assert after.last_error == unknown_path_variable('MISSING')
        assert after.enemies[0].active
        assert after.current_input == 'mv file.txt $MISSING'

    def test_missing_destination(self, started, make_enemy):
        state = with_enemies(started, make_enemy('cp', filename='file.txt'),
                             current_input='cp file.txt')
        after = process_input('cp file.txt', state)
        assert after.last_error == missing_destination('cp')
        assert after.enemies[0].active
        assert after.current_input == 'cp file.txt'

    def test_literal_destination(self, started, make_enemy):
        state = with_enemies(started, make_enemy('cp', filename='file.txt'))
        after = process_input('cp file.txt /tmp', state)
        assert not after.enemies[0].active


# =============================================================================
# Keystrokes and completion
# =============================================================================

class TestSuggestions:

    def test_empty_input(self):
        assert generate_suggestions('', Tier.PRO) == ()

    def test_prefix_up_to_tier(self):
        assert generate_suggestions('c', Tier.BEGINNER) == ('cd', 'cat')
        assert generate_suggestions('c', Tier.INTERMEDIATE) == ('cd', 'cat', 'cp')

    def test_capped_at_four(self):
        assert len(generate_suggestions('c', Tier.PRO)) == 4

    def test_cd_directories_at_root(self, started):
        assert generate_suggestions('cd h', Tier.BEGINNER, started) == ('cd home',)

    def test_cd_parent_entries_below_root(self, started):
        state = process_input('ls', process_input('cd home', started))
        suggestions = generate_suggestions('cd ', Tier.BEGINNER, state)
        assert suggestions[:3] == ('cd /', 'cd ..', 'cd user')


class TestUpdateInput:

    def test_targets_first_matching_enemy(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'), make_enemy('cat'))
        after = update_input(state, 'ca')
        assert after.target_enemy == state.enemies[1].id
        assert after.current_input == 'ca'
        assert after.suggestions == ('cat',)

    def test_empty_text_clears_target(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'), target_enemy='x')
        assert update_input(state, '').target_enemy is None

    def test_does_not_commit(self, started, make_enemy):
        state = with_enemies(started, make_enemy('echo'))
        after = update_input(state, 'echo')
        assert after.enemies == state.enemies
        assert after.score == 0


class TestComplete:

    def test_cycles_directories(self, started):
        state = update_input(started, 'cd ')
        seen = []
        for _ in range(5):
            state = complete(state)
            seen.append(state.current_input)
        assert seen == ['cd home', 'cd bin', 'cd etc', 'cd var', 'cd home']

    def test_cycles_visible_filenames(self, started):
        state = replace(update_input(started, 'cat x'),
                        visible_filenames=('a.txt', 'b.txt'))
        state = complete(state)
        assert state.current_input == 'cat a.txt'
        state = complete(state)
        assert state.current_input == 'cat b.txt'

    def test_completes_target_command_then_filename(self, started, make_enemy):
        state = with_enemies(started, make_enemy('cat', filename='resume.pdf'))
        state = complete(update_input(state, 'ca'))
        assert state.current_input == 'cat'
        state = complete(update_input(state, 'cat'))
        assert state.current_input == 'cat resume.pdf'

    def test_standalone_target_stays_bare(self, started, make_enemy):
        state = with_enemies(started, make_enemy('pwd', filename='pwd'))
        state = complete(update_input(state, 'pwd'))
        assert state.current_input == 'pwd'

    def test_falls_back_to_first_suggestion(self, started):
        state = complete(update_input(started, 'ec'))
        assert state.current_input == 'echo'

    def test_nothing_to_complete(self, started):
        state = update_input(started, 'zz')
        assert complete(state) == state
