import logging

from django.db import transaction
from django.utils import timezone

from market_api.exceptions import WorkflowError
from wallet.services import pay_milestone
from .models import Project, Milestone, Bid, Contract
from .utils import send_bid_accepted_email

logger = logging.getLogger(__name__)


def create_project(client, milestones, **fields):
    """
    Persist a project and its milestones as one unit. Milestones get
    `order_index` from their position in the list.
    """
    with transaction.atomic():
        project = Project.objects.create(client=client, status=Project.OPEN, **fields)
        Milestone.objects.bulk_create([
            Milestone(project=project, order_index=index, status=Milestone.PENDING, **milestone)
            for index, milestone in enumerate(milestones)
        ])

    logger.info(f"Project {project.id} created by client {client.id} with {len(milestones)} milestones")
    return project


def change_project_status(project, target):
    if project.status == target:
        raise WorkflowError(f"Project is already {target}.")
    if not project.can_transition_to(target):
        raise WorkflowError(f"Cannot move a project from '{project.status}' to '{target}'.")
    if target == Project.ACTIVE:
        raise WorkflowError("A project becomes active when a bid is accepted.")

    project.status = target
    update_fields = ['status', 'updated_at']
    if target == Project.COMPLETED:
        project.completed_at = timezone.now()
        update_fields.append('completed_at')
    project.save(update_fields=update_fields)

    logger.info(f"Project {project.id} moved to {target}")
    return project


def accept_bid(bid):
    """
    Accept one bid: every other bid on the project is rejected, the project
    goes active and a contract is opened. All or nothing.
    """
    with transaction.atomic():
        project = Project.objects.select_for_update().get(pk=bid.project_id)
        bid = Bid.objects.select_for_update().get(pk=bid.pk)

        if bid.status != Bid.PENDING:
            raise WorkflowError(f"This bid has already been {bid.status}.")
        if project.status != Project.OPEN:
            raise WorkflowError("Bids can only be accepted while the project is open.")
        if project.bids.filter(status=Bid.ACCEPTED).exists():
            raise WorkflowError("A bid has already been accepted for this project.")

        bid.status = Bid.ACCEPTED
        bid.save(update_fields=['status', 'updated_at'])
        project.bids.exclude(pk=bid.pk).update(status=Bid.REJECTED, updated_at=timezone.now())

        project.status = Project.ACTIVE
        project.save(update_fields=['status', 'updated_at'])

        contract = Contract.objects.create(
            project=project,
            contractor=bid.contractor,
            bid=bid,
            start_date=timezone.localdate(),
            end_date=bid.proposed_timeline or project.deadline,
            total_amount=bid.proposed_budget,
        )

    logger.info(f"Bid {bid.id} accepted, contract {contract.id} opened for project {project.id}")
    send_bid_accepted_email(bid)
    return contract


def reject_bid(bid):
    if bid.status != Bid.PENDING:
        raise WorkflowError(f"This bid has already been {bid.status}.")

    bid.status = Bid.REJECTED
    bid.save(update_fields=['status', 'updated_at'])
    return bid


def _ongoing_contract(milestone):
    contract = getattr(milestone.project, 'contract', None)
    if contract is None or contract.status != Contract.ONGOING:
        raise WorkflowError("This project has no ongoing contract.")
    return contract


def submit_milestone(milestone, contractor):
    contract = _ongoing_contract(milestone)
    if contract.contractor_id != contractor.id:
        raise WorkflowError("Only the contracted contractor can submit this milestone.")
    if milestone.status not in (Milestone.PENDING, Milestone.REJECTED):
        raise WorkflowError("Only pending or rejected milestones can be submitted.")

    milestone.status = Milestone.SUBMITTED
    milestone.submitted_at = timezone.now()
    milestone.save(update_fields=['status', 'submitted_at'])
    return milestone


def approve_milestone(milestone):
    """
    Approve a submitted milestone and pay it out. Approving the last
    outstanding milestone completes both the project and the contract.
    """
    with transaction.atomic():
        milestone = Milestone.objects.select_for_update().select_related('project').get(pk=milestone.pk)
        if milestone.status != Milestone.SUBMITTED:
            raise WorkflowError("Only submitted milestones can be approved.")
        contract = _ongoing_contract(milestone)

        milestone.status = Milestone.APPROVED
        milestone.approved_at = timezone.now()
        milestone.is_paid = True
        milestone.save(update_fields=['status', 'approved_at', 'is_paid'])

        pay_milestone(milestone, contract)

        project = milestone.project
        if not project.milestones.exclude(status=Milestone.APPROVED).exists():
            project.status = Project.COMPLETED
            project.completed_at = timezone.now()
            project.save(update_fields=['status', 'completed_at', 'updated_at'])

            contract.status = Contract.COMPLETED
            contract.end_date = timezone.localdate()
            contract.save(update_fields=['status', 'end_date', 'updated_at'])
            logger.info(f"Project {project.id} completed")

    logger.info(f"Milestone {milestone.id} approved and paid")
    return milestone


def reject_milestone(milestone, reason):
    if milestone.status != Milestone.SUBMITTED:
        raise WorkflowError("Only submitted milestones can be rejected.")

    milestone.status = Milestone.REJECTED
    milestone.rejected_reason = reason
    milestone.save(update_fields=['status', 'rejected_reason'])
    return milestone
