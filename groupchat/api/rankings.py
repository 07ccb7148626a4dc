# groupchat/api/rankings.py

from fastapi import APIRouter, Depends

from groupchat.api.dependencies import get_current_user, get_ranking_interactor
from groupchat.infrastructure import schemas
from groupchat.interactors.ranking_interactor import RankingInteractor

router = APIRouter()


@router.get("/{chat_id}", response_model=schemas.RankingsResponse)
async def read_rankings(
    chat_id: str,
    ranking_interactor: RankingInteractor = Depends(get_ranking_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    rankings = await ranking_interactor.get_rankings(chat_id, current_user.id)
    return schemas.RankingsResponse(rankings=rankings)


@router.post("", response_model=schemas.SuccessResponse)
async def save_rankings(
    request: schemas.SaveRankingsRequest,
    ranking_interactor: RankingInteractor = Depends(get_ranking_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    await ranking_interactor.save_rankings(
        request.chat_id, current_user.id, request.rankings
    )
    return schemas.SuccessResponse(success=True, message="Rankings saved successfully")
