# groupchat/tests/unit/test_ranking_gateway.py
import json

import pytest

from groupchat.infrastructure import schemas


@pytest.mark.asyncio
async def test_no_rankings_is_empty_list(ranking_gateway):
    assert await ranking_gateway.get_rankings("group_g1", "u1") == []


@pytest.mark.asyncio
async def test_saved_rankings_come_back_in_order(ranking_gateway, mock_redis):
    rankings = [
        schemas.Ranking(user_id="a", position=0),
        schemas.Ranking(user_id="b", position=1),
    ]
    await ranking_gateway.save_rankings("group_g1", "u1", rankings)

    assert await ranking_gateway.get_rankings("group_g1", "u1") == rankings
    assert json.loads(await mock_redis.get("chat:group_g1:user:u1:rankings")) == [
        {"userId": "a", "position": 0},
        {"userId": "b", "position": 1},
    ]


@pytest.mark.asyncio
async def test_save_overwrites_previous_rankings(ranking_gateway):
    await ranking_gateway.save_rankings(
        "group_g1", "u1", [schemas.Ranking(user_id="a", position=0)]
    )
    await ranking_gateway.save_rankings(
        "group_g1", "u1", [schemas.Ranking(user_id="c", position=0)]
    )

    assert await ranking_gateway.get_rankings("group_g1", "u1") == [
        schemas.Ranking(user_id="c", position=0)
    ]


@pytest.mark.asyncio
async def test_rankings_are_per_user(ranking_gateway):
    await ranking_gateway.save_rankings(
        "group_g1", "u1", [schemas.Ranking(user_id="a", position=0)]
    )

    assert await ranking_gateway.get_rankings("group_g1", "u2") == []
