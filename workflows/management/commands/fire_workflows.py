from django.core.management.base import BaseCommand, CommandError

from members.models import Member
from workflows.engine import WorkflowEngine
from workflows.models import EmailWorkflow


class Command(BaseCommand):
    help = "Fire the signup or renewal email workflows for a member right away, without Celery"

    def add_arguments(self, parser):
        parser.add_argument('--member', type=int, required=True, help='Member ID whose data fills the templates')
        parser.add_argument('--event', choices=EmailWorkflow.EVENTS, required=True, help='Trigger event to fire')

    def handle(self, *args, **options):
        member = Member.objects.filter(pk=options['member']).first()
        if member is None:
            raise CommandError(f"Member {options['member']} does not exist")

        report = WorkflowEngine().fire(member.organization_id, options['event'], member.template_variables())

        if not report.matched:
            self.stdout.write(self.style.WARNING(f"No active '{options['event']}' workflows matched"))
            return

        for result in report.results:
            if result.success:
                self.stdout.write(self.style.SUCCESS(
                    f"{result.workflow_name}: sent to {', '.join(result.delivered)}"
                ))
                continue
            if result.error:
                self.stdout.write(self.style.ERROR(f"{result.workflow_name}: {result.error}"))
            for address, reason in result.failed.items():
                self.stdout.write(self.style.ERROR(f"{result.workflow_name}: {address} failed ({reason})"))

        self.stdout.write(f"{report.emails_sent} email(s) sent for {report.matched} workflow(s)")
