import json

import pytest

from split_macros.aggregation.accumulator import fold_all
from split_macros.domain.game_record import Location
from split_macros.domain.split_tree import Dimension, MacroTree
from split_macros.exceptions import MacroFormatError
from split_macros.store.serialization import MacroTreeSerializer
from tests.helpers import JUDGE, make_record


def _built_tree() -> MacroTree:
    tree = MacroTree(
        key="splits:player:NYY-Aaron_Judge:2025",
        subject=JUDGE,
        season=2025,
        last_updated="2025-06-01T12:00:00+00:00",
    )
    return fold_all(
        tree,
        [
            make_record("g2", location=Location.AWAY, opponent="TOR", opposing_pitcher="TOR-Chris_Bassitt"),
            make_record(
                "g1",
                batting={"at_bats": 4, "hits": 2, "home_runs": 1},
                pitching={"innings_pitched": "1.2", "strikeouts": 2},
                counts={"1-2": {"at_bats": 1, "strikeouts": 1}},
            ),
        ],
    )


class TestMacroTreeSerializer:
    def test_decoded_tree_equals_original(self) -> None:
        serializer = MacroTreeSerializer()
        tree = _built_tree()
        assert serializer.deserialize(serializer.serialize(tree)) == tree

    def test_games_serialized_sorted(self) -> None:
        payload = json.loads(MacroTreeSerializer().serialize(_built_tree()))
        assert payload["root"]["games"] == ["g1", "g2"]

    def test_dimensions_are_node_keys(self) -> None:
        payload = json.loads(MacroTreeSerializer().serialize(_built_tree()))
        root = payload["root"]
        assert set(root) == {"stats", "games", "by_location", "vs_handedness", "vs_teams", "vs_pitchers", "by_count"}
        assert root["vs_teams"]["BOS"]["by_location"]["home"]["games"] == ["g1"]

    def test_counting_totals_recovered_from_views(self) -> None:
        serializer = MacroTreeSerializer()
        decoded = serializer.deserialize(serializer.serialize(_built_tree()))
        assert decoded.root.batting == {"at_bats": 8, "hits": 3, "home_runs": 1}
        assert decoded.root.pitching == {"outs_recorded": 5, "strikeouts": 2}
        count_node = decoded.root.child(Dimension.BY_COUNT, "1-2")
        assert count_node is not None
        assert count_node.pitching == {}

    def test_empty_tree(self) -> None:
        serializer = MacroTreeSerializer()
        tree = MacroTree(key="splits:team:NYY:2025", subject=JUDGE, season=2025)
        decoded = serializer.deserialize(serializer.serialize(tree))
        assert decoded.is_empty
        assert decoded == tree

    @pytest.mark.parametrize("raw", ["not json", "[]", '{"key": "k"}', '{"key": "k", "subject": {"kind": "coach"}}'])
    def test_undecodable_values_raise(self, raw: str) -> None:
        with pytest.raises(MacroFormatError):
            MacroTreeSerializer().deserialize(raw)
