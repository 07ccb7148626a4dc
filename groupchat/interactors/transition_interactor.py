# groupchat/interactors/transition_interactor.py
import asyncio
import logging
import random
from enum import Enum
from typing import List, Optional, Set

from groupchat.domain.colors import assign_color
from groupchat.domain.events import GroupChatUpdate, Initiator
from groupchat.domain.exceptions import ForbiddenError, StoreError
from groupchat.domain.timestamps import now_ms
from groupchat.gateways.interfaces import IGroupChatGateway, ITransitionGateway
from groupchat.gateways.keys import new_group_chat_id
from groupchat.infrastructure import schemas
from groupchat.infrastructure.event_dispatcher import EventDispatcher
from groupchat.infrastructure.security import AuthorizationPolicy

REBUILD_CHAT_NAME = "Anonymous Group Chat"


class TransitionMode(str, Enum):
    TRANSITION = "transition"
    REBUILD = "rebuild"


class TransitionInteractor:
    """Reshuffles every known user into a fresh set of group chats.

    A transition hard-deletes the previous chats, a rebuild archives them.
    The sequence is a series of independent store writes; a crash midway
    leaves some users without a chat, which the verification pass reports
    through ``all_users_verified`` instead of raising.
    """

    def __init__(
        self,
        group_chat_gateway: IGroupChatGateway,
        transition_gateway: ITransitionGateway,
        event_dispatcher: EventDispatcher,
        authorization_policy: AuthorizationPolicy,
        logger: logging.Logger,
        rng: Optional[random.Random] = None,
        capacity: int = 5,
        settle_delay: float = 0.5,
        preserve_rankings: bool = True,
    ):
        self.group_chat_gateway = group_chat_gateway
        self.transition_gateway = transition_gateway
        self.event_dispatcher = event_dispatcher
        self.authorization_policy = authorization_policy
        self.logger = logger
        self.rng = rng or random.Random()
        self.capacity = capacity
        self.settle_delay = settle_delay
        self.preserve_rankings = preserve_rankings

    async def transition(
        self,
        initiator: schemas.User,
        transition_date: int | str | None = None,
        external_partition: Optional[List[List[str]]] = None,
        mode: TransitionMode = TransitionMode.TRANSITION,
    ) -> schemas.TransitionResult:
        if not self.authorization_policy.can_initiate_transition(initiator.id):
            raise ForbiddenError("Admin access required")

        admin_name = initiator.name or "Admin"
        self.logger.info(f"Starting group chat {mode.value} initiated by {initiator.id}")

        # Advisory only: clients show a waiting state, the result is authoritative.
        await self.event_dispatcher.dispatch(
            GroupChatUpdate(
                event_type="rebuild",
                timestamp=now_ms(),
                message=(
                    "Group chats are being rebuilt"
                    if mode is TransitionMode.REBUILD
                    else "Group chats are transitioning to new sets"
                ),
                initiated_by=Initiator(id=initiator.id, name=admin_name),
                transition_date=transition_date,
            )
        )

        user_ids = await self.group_chat_gateway.list_all_user_ids()
        chat_ids = await self.group_chat_gateway.list_all_group_chat_ids()
        previous_chat_id = await self.group_chat_gateway.get_current_chat(initiator.id)
        self.logger.info(f"Found {len(user_ids)} users and {len(chat_ids)} group chats")

        if mode is TransitionMode.REBUILD:
            await self._archive_chats(chat_ids)
        else:
            await self._delete_chats(chat_ids)

        await self.group_chat_gateway.clear_available()
        for user_id in user_ids:
            await self.group_chat_gateway.clear_current_chat(user_id)
            await self.group_chat_gateway.clear_membership_index(user_id)

        groups = self.partition(user_ids, external_partition)
        chat_name = REBUILD_CHAT_NAME if mode is TransitionMode.REBUILD else ""

        summaries: List[schemas.NewGroupChatSummary] = []
        current_user_chat_id = None
        for members in groups:
            summary = await self._create_group(
                members, chat_name, initiator.id, transition_date
            )
            summaries.append(summary)
            if initiator.id in members:
                current_user_chat_id = summary.chat_id
                self.logger.info(f"Initiator lands in chat {current_user_chat_id}")

        all_users_verified = await self._verify(user_ids)
        if not all_users_verified:
            self.logger.warning(
                "Some users may not have been properly assigned to group chats"
            )

        if self.settle_delay > 0:
            await asyncio.sleep(self.settle_delay)

        await self._record(initiator.id, admin_name, summaries, transition_date)

        message = f"Created {len(summaries)} group chats"
        if not all_users_verified:
            message += ". Some users may need to refresh"
        return schemas.TransitionResult(
            success=True,
            message=message,
            group_chats=summaries,
            current_user_chat_id=current_user_chat_id,
            previous_chat_id=previous_chat_id,
            transition_date=transition_date,
            all_users_verified=all_users_verified,
        )

    def partition(
        self, user_ids: Set[str], external_partition: Optional[List[List[str]]] = None
    ) -> List[List[str]]:
        if external_partition:
            self.logger.info("Using provided algorithm output for group assignments")
            groups = []
            placed: Set[str] = set()
            for group in external_partition:
                members = []
                for user_id in group:
                    if len(members) == self.capacity:
                        break
                    # unknown ids are dropped, and a user lands in one group only
                    if user_id in user_ids and user_id not in placed:
                        members.append(user_id)
                        placed.add(user_id)
                if members:
                    groups.append(members)
            return groups

        self.logger.info("No algorithm output provided, using random group assignment")
        shuffled = sorted(user_ids)
        self.rng.shuffle(shuffled)
        return [
            shuffled[i : i + self.capacity]
            for i in range(0, len(shuffled), self.capacity)
        ]

    async def _archive_chats(self, chat_ids: Set[str]) -> None:
        archived_at = now_ms()
        archived = 0
        for chat_id in sorted(chat_ids):
            chat = await self.group_chat_gateway.get_chat(chat_id)
            if chat is None or chat.archived:
                continue
            await self.group_chat_gateway.archive_chat(chat, archived_at)
            archived += 1
        self.logger.info(f"Archived {archived} group chats")

    async def _delete_chats(self, chat_ids: Set[str]) -> None:
        for chat_id in sorted(chat_ids):
            ranking_count = await self.group_chat_gateway.count_ranking_keys(chat_id)
            if ranking_count and self.preserve_rankings:
                self.logger.info(
                    f"Preserving {ranking_count} ranking records for chat {chat_id}"
                )
            await self.group_chat_gateway.delete_chat_keys(
                chat_id, keep_rankings=self.preserve_rankings
            )
        self.logger.info(f"Deleted {len(chat_ids)} group chats")

    async def _create_group(
        self,
        members: List[str],
        name: str,
        creator_id: str,
        transition_date: int | str | None,
    ) -> schemas.NewGroupChatSummary:
        chat = schemas.GroupChat(
            id=new_group_chat_id(),
            name=name,
            creator_id=creator_id,
            members=members,
            created_at=now_ms(),
            transition_date=transition_date,
        )
        await self.group_chat_gateway.put_chat(chat)
        if len(members) < self.capacity:
            await self.group_chat_gateway.add_to_available(chat.id)

        assignments = []
        for index, member_id in enumerate(members):
            color = assign_color(index)
            await self.group_chat_gateway.set_color(chat.id, member_id, color)
            await self.group_chat_gateway.add_membership_index(member_id, chat.id)
            await self.group_chat_gateway.set_current_chat(member_id, chat.id)
            assignments.append(schemas.ColorAssignment(user_id=member_id, color=color))

        return schemas.NewGroupChatSummary(
            chat_id=chat.id, members=members, color_assignments=assignments
        )

    async def _verify(self, user_ids: Set[str]) -> bool:
        verified = True
        for user_id in sorted(user_ids):
            try:
                chat_id = await self.group_chat_gateway.get_current_chat(user_id)
                if not chat_id:
                    self.logger.error(f"User {user_id} does not have a current group chat")
                    verified = False
                    continue
                if await self.group_chat_gateway.get_color(chat_id, user_id) is None:
                    self.logger.error(
                        f"User {user_id} does not have a color assigned in chat {chat_id}"
                    )
                    verified = False
            except StoreError as e:
                self.logger.error(f"Error verifying setup for user {user_id}: {e.detail}")
                verified = False
        return verified

    async def _record(
        self,
        admin_id: str,
        admin_name: str,
        summaries: List[schemas.NewGroupChatSummary],
        transition_date: int | str | None,
    ) -> None:
        record = schemas.TransitionRecord(
            timestamp=now_ms(),
            admin_user_id=admin_id,
            admin_user_name=admin_name,
            group_chat_count=len(summaries),
            transition_date=transition_date,
        )
        await self.transition_gateway.save_last_transition(record)
        await self.transition_gateway.save_history_entry(
            schemas.TransitionHistoryEntry(
                **record.model_dump(),
                group_chats=[
                    schemas.TransitionChatSummary(
                        chat_id=summary.chat_id, member_count=len(summary.members)
                    )
                    for summary in summaries
                ],
            )
        )

    async def last_transition(self) -> schemas.LastTransition:
        try:
            record = await self.transition_gateway.get_last_transition()
        except StoreError as e:
            self.logger.error(f"Error fetching last transition data: {e.detail}")
            return schemas.LastTransition(error="Error fetching transition data")
        return schemas.LastTransition(transition=record)
