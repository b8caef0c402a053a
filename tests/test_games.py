"""
Tests for alias resolution and game normalization.
"""

from datetime import datetime, timedelta, timezone

import pytest

from uku_ranking.models import GameRecord, TeamAtTournament
from uku_ranking.prepare.aliases import build_alias_table, resolve_team, team_names
from uku_ranking.prepare.games import (
    filter_division,
    games_from_rows,
    normalize,
    parse_date,
    parse_score,
    process_games,
    tag_guests,
    teams_at_tournaments_from_rows,
    teams_in_games,
)


@pytest.fixture
def alias_table():
    return build_alias_table([
        ["Alpha", "Alpha Ultimate", "ALF", ""],
        ["Bravo", "Bravo B", "", ""],
        ["Charlie", "", "", ""],
    ])


def game(team1, team2, score1, score2, tournament="T1", date=datetime(2024, 6, 1)):
    return GameRecord(tournament=tournament, date=date, team1=team1, team2=team2, score1=score1, score2=score2)


class TestAliases:
    """Tests for alias table building and resolution."""

    def test_resolves_alias_to_canonical(self, alias_table):
        assert resolve_team("ALF", alias_table) == "Alpha"
        assert resolve_team("Bravo B", alias_table) == "Bravo"

    def test_unknown_name_is_canonical(self, alias_table):
        assert resolve_team("Delta", alias_table) == "Delta"

    def test_canonical_name_resolves_to_itself(self, alias_table):
        assert resolve_team("Charlie", alias_table) == "Charlie"

    def test_blank_alias_cells_ignored(self, alias_table):
        assert alias_table["Charlie"] == set()
        assert resolve_team("", alias_table) == ""

    def test_first_listing_wins(self):
        table = build_alias_table([["Alpha", "Shared"], ["Bravo", "Shared"]])
        assert resolve_team("Shared", table) == "Alpha"

    def test_team_names_in_table_order(self):
        assert team_names([["Bravo", "B"], ["", "x"], ["Alpha"]]) == ["Bravo", "Alpha"]


class TestCellParsing:
    """Tests for score and date parsing."""

    def test_parse_score_number(self):
        assert parse_score("15") == 15
        assert parse_score(13) == 13
        assert parse_score("7.0") == 7

    def test_parse_score_blank_or_invalid(self):
        assert parse_score("") is None
        assert parse_score(None) is None
        assert parse_score("abc") is None
        assert parse_score(float("nan")) is None

    def test_parse_score_infinite_or_fractional(self):
        assert parse_score("inf") is None
        assert parse_score("-inf") is None
        assert parse_score("1e400") is None
        assert parse_score("15.5") is None

    def test_parse_date_day_first(self):
        assert parse_date("15/06/2024") == datetime(2024, 6, 15)

    def test_parse_date_passthrough(self):
        assert parse_date(datetime(2024, 6, 15, 10, 30)) == datetime(2024, 6, 15, 10, 30)

    def test_parse_date_with_offset_is_naive_utc(self):
        assert parse_date("2024-06-01T10:00:00Z") == datetime(2024, 6, 1, 10, 0)
        assert parse_date("2024-06-01T12:00:00+02:00") == datetime(2024, 6, 1, 10, 0)
        assert parse_date(datetime(2024, 6, 1, 12, tzinfo=timezone(timedelta(hours=2)))) == datetime(2024, 6, 1, 10)

    def test_parse_date_blank(self):
        assert parse_date("") is None
        assert parse_date(None) is None
        assert parse_date("not a date") is None


class TestRowConversion:
    """Tests for converting raw table rows."""

    def test_filter_division_skips_header(self):
        rows = [
            ["Tournament", "Date", "Team_1", "Team_2", "Score_1", "Score_2", "Division"],
            ["T1", "01/06/2024", "A", "B", "15", "10", "mixed"],
            ["T1", "01/06/2024", "C", "D", "15", "10", "open"],
            ["T1", "01/06/2024", "E", "F", "15", "10"],
        ]
        result = filter_division(rows, "mixed")
        assert result == [rows[1]]

    def test_games_from_rows_resolves_aliases(self, alias_table):
        games = games_from_rows([["T1", "01/06/2024", "ALF", "Bravo B", "15", "12"]], alias_table)
        assert len(games) == 1
        assert games[0].team1 == "Alpha"
        assert games[0].team2 == "Bravo"
        assert games[0].score1 == 15
        assert games[0].date == datetime(2024, 6, 1)

    def test_short_rows_dropped(self, alias_table):
        assert games_from_rows([["T1", "01/06/2024", "A", "B"]], alias_table) == []

    def test_teams_at_tournaments_resolve_aliases(self, alias_table):
        result = teams_at_tournaments_from_rows([["ALF", "T1"], ["Charlie", "T2"]], alias_table)
        assert result == [TeamAtTournament("Alpha", "T1"), TeamAtTournament("Charlie", "T2")]


class TestGuestTagging:
    """Tests for tagging teams not rostered at a tournament."""

    def test_unrostered_team_tagged(self):
        rosters = [TeamAtTournament("A", "T1"), TeamAtTournament("B", "T1")]
        result = tag_guests([game("A", "X", 15, 10)], rosters)
        assert result[0].team1 == "A"
        assert result[0].team2 == "X @ T1"

    def test_both_sides_tagged(self):
        rosters = [TeamAtTournament("A", "T2")]
        result = tag_guests([game("A", "B", 15, 10)], rosters)
        assert result[0].team1 == "A @ T1"
        assert result[0].team2 == "B @ T1"

    def test_tournament_without_roster_tags_everyone(self):
        result = tag_guests([game("A", "B", 15, 10, tournament="Unknown")], [])
        assert (result[0].team1, result[0].team2) == ("A @ Unknown", "B @ Unknown")

    def test_input_not_modified(self):
        original = game("A", "X", 15, 10)
        tag_guests([original], [TeamAtTournament("A", "T1")])
        assert original.team2 == "X"


class TestProcessGames:
    """Tests for filtering, reordering and sorting games."""

    def test_winner_first(self):
        result = process_games([game("A", "B", 10, 15)])
        assert (result[0].team1, result[0].team2, result[0].score1, result[0].score2) == ("B", "A", 15, 10)

    def test_missing_scores_dropped(self):
        result = process_games([game("A", "B", None, 15), game("A", "C", 15, None), game("A", "D", 15, 9)])
        assert [g.team2 for g in result] == ["D"]

    def test_forfeits_dropped(self):
        result = process_games([game("A", "B", 1, 0), game("A", "C", 0, 1), game("A", "D", 2, 0)])
        assert [g.team2 for g in result] == ["D"]

    def test_draws_kept_by_default(self):
        result = process_games([game("A", "B", 10, 10)])
        assert len(result) == 1

    def test_draws_removed_when_requested(self):
        result = process_games([game("A", "B", 10, 10), game("A", "C", 11, 10)], remove_draws=True)
        assert [g.team2 for g in result] == ["C"]

    def test_sorted_by_date_tournament_and_teams(self):
        games = [
            game("C", "D", 15, 10, tournament="T2", date=datetime(2024, 6, 2)),
            game("B", "A", 15, 10, tournament="T1", date=datetime(2024, 6, 2)),
            game("A", "C", 15, 10, tournament="T1", date=datetime(2024, 6, 2)),
            game("Z", "Y", 15, 10, tournament="T9", date=datetime(2024, 6, 1)),
        ]
        result = process_games(games)
        assert [(g.tournament, g.team1) for g in result] == [("T9", "Z"), ("T1", "A"), ("T1", "B"), ("T2", "C")]

    def test_undated_games_sort_first(self):
        result = process_games([game("A", "B", 15, 10), game("C", "D", 15, 10, date=None)])
        assert result[0].team1 == "C"


class TestNormalize:
    """Tests for the full normalization."""

    def test_winner_first_invariant(self, alias_table):
        rows = [
            ["T1", "01/06/2024", "ALF", "Bravo", "9", "15"],
            ["T1", "01/06/2024", "Charlie", "Bravo", "0", "1"],
            ["T1", "01/06/2024", "Charlie", "Alpha", "12", "12"],
            ["T1", "01/06/2024", "Charlie", "Alpha", "", "12"],
        ]
        rosters = [TeamAtTournament(t, "T1") for t in ("Alpha", "Bravo", "Charlie")]
        result = normalize(rows, alias_table, rosters)

        assert len(result) == 2
        for g in result:
            assert g.score1 >= g.score2
            assert (g.score1, g.score2) not in ((1, 0), (0, 1))
        assert [g.team1 for g in result] == ["Bravo", "Charlie"]

    def test_guest_tagging_scenario(self, alias_table):
        rows = [["X", "01/06/2024", "Alpha", "Outsider", "15", "3"]]
        result = normalize(rows, alias_table, [TeamAtTournament("Alpha", "X")])
        assert result[0].team1 == "Alpha"
        assert result[0].team2 == "Outsider @ X"


class TestTeamsInGames:
    """Tests for teams_in_games."""

    def test_first_appearance_order(self):
        games = [game("B", "A", 15, 10), game("C", "B", 15, 10)]
        assert teams_in_games(games) == ["B", "A", "C"]

    def test_as_if_date(self):
        games = [
            game("A", "B", 15, 10, date=datetime(2024, 6, 1)),
            game("C", "D", 15, 10, date=datetime(2024, 7, 1)),
        ]
        assert teams_in_games(games, as_if_date=datetime(2024, 6, 15)) == ["A", "B"]


class TestMalformedCells:
    """Rows with unusable cells are dropped or normalized, never raised."""

    @pytest.fixture
    def rosters(self):
        return [TeamAtTournament(t, "T1") for t in ("Alpha", "Bravo", "Charlie")]

    def test_infinite_scores_dropped(self, alias_table, rosters):
        rows = [
            ["T1", "01/06/2024", "Alpha", "Bravo", "inf", "3"],
            ["T1", "01/06/2024", "Alpha", "Charlie", "1e400", "3"],
            ["T1", "01/06/2024", "Bravo", "Charlie", "15", "3"],
        ]
        result = normalize(rows, alias_table, rosters)
        assert [(g.team1, g.team2) for g in result] == [("Bravo", "Charlie")]

    def test_aware_and_naive_dates_sort_together(self, alias_table, rosters):
        rows = [
            ["T1", "02/06/2024", "Alpha", "Bravo", "15", "3"],
            ["T1", "2024-06-01T10:00:00Z", "Bravo", "Charlie", "15", "3"],
        ]
        result = normalize(rows, alias_table, rosters)
        assert [g.date for g in result] == [datetime(2024, 6, 1, 10, 0), datetime(2024, 6, 2)]
