"""
Complaint lifecycle: raising, threaded replies, closure and listings
"""
from typing import Any, Dict, List, Optional

from app.config import settings
from app.exceptions import ConflictError, NotFoundError
from app.models import Complaint, ComplaintReply, ComplaintStatus, Severity
from app.security import Actor, ensure_admin, ensure_owner
from app.services.classification_gateway import ClassificationGateway
from app.services.entity_store import EntityStore, serialize_complaint, serialize_complaint_reply
from app.services.pagination import normalize_page_params, paginate
from app.logging_config import logger

# Severity assigned when complaints are not classified
DEFAULT_COMPLAINT_SEVERITY = Severity.HIGH


class ComplaintLifecycleManager:
    """Orchestrates complaints through open -> resolved"""

    def __init__(
        self,
        store: EntityStore,
        gateway: ClassificationGateway,
        classify_severity: Optional[bool] = None,
    ):
        """
        Initialize complaint manager

        Args:
            store: Entity store bound to the request's session
            gateway: Classifier used when severity classification is enabled
            classify_severity: Override for SEVERITY_CLASSIFICATION_ENABLED
        """
        self.store = store
        self.gateway = gateway
        self.classify_severity = (
            settings.SEVERITY_CLASSIFICATION_ENABLED if classify_severity is None else classify_severity
        )

    async def raise_complaint(
        self,
        actor: Actor,
        order_id: str,
        product_type: str,
        description: str,
    ) -> Dict[str, Any]:
        severity = await self._assign_severity(description)

        complaint = await self.store.save(Complaint(
            order_id=order_id,
            product_type=product_type,
            description=description,
            user_id=actor.user_id,
            severity=severity,
        ))
        logger.info(f"Complaint {complaint.id} raised by {actor.user_id} with severity {severity.value}")
        return serialize_complaint(complaint)

    async def get_user_complaints(self, actor: Actor, page: Any = None, limit: Any = None) -> Dict[str, Any]:
        """Page through the actor's own complaints, newest first"""
        page, limit = normalize_page_params(page, limit)
        total = await self.store.count_complaints(user_id=actor.user_id)
        meta = paginate(total, page, limit)

        complaints = await self.store.list_complaints(
            user_id=actor.user_id, skip=meta.skip, limit=meta.limit
        )
        return {
            "complaints": await self.store.expand_complaints(complaints),
            "pagination": meta.to_dict(total_key="totalComplaints"),
        }

    async def get_all_complaints(self, actor: Actor) -> List[Dict[str, Any]]:
        ensure_admin(actor)
        complaints = await self.store.list_complaints()
        return await self.store.expand_complaints(complaints, include_owner=True)

    async def close_complaint(self, complaint_id: Any, actor: Actor) -> Dict[str, Any]:
        complaint = await self._require_complaint(complaint_id)
        ensure_owner(actor, complaint.user_id, "Unauthorized to close this complaint")

        if complaint.status == ComplaintStatus.RESOLVED:
            raise ConflictError("Complaint is already resolved")

        complaint.status = ComplaintStatus.RESOLVED
        complaint = await self.store.save(complaint)
        logger.info(f"Complaint {complaint.id} resolved by {actor.user_id}")
        return serialize_complaint(complaint)

    async def create_complaint_reply(self, actor: Actor, complaint_id: Any, content: str) -> Dict[str, Any]:
        """Any authenticated actor may reply to any complaint"""
        complaint = await self._require_complaint(complaint_id)

        reply = await self.store.save(ComplaintReply(
            content=content,
            user_id=actor.user_id,
            complaint_id=complaint.id,
        ))
        await self.store.append_child(complaint, "replies", reply.id)

        users = await self.store.get_users([actor.user_id])
        return serialize_complaint_reply(reply, users)

    async def _assign_severity(self, description: str) -> Severity:
        if not self.classify_severity:
            return DEFAULT_COMPLAINT_SEVERITY
        outcome = await self.gateway.classify_severity_outcome(description)
        if outcome.degraded:
            logger.warning("Severity classification degraded, using default label")
        return Severity(outcome.label)

    async def _require_complaint(self, complaint_id: Any) -> Complaint:
        complaint = await self.store.get(Complaint, complaint_id)
        if complaint is None:
            raise NotFoundError("Complaint not found")
        return complaint
