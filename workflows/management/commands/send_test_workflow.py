from django.core.management.base import BaseCommand, CommandError

from workflows.client import WorkflowTestSendClient
from workflows.exceptions import DeliveryFailure, Unauthenticated


class Command(BaseCommand):
    help = "Ask the API to send a test email for a workflow, authenticating with a bearer access token"

    def add_arguments(self, parser):
        parser.add_argument('--workflow', type=int, required=True, help='Workflow ID to test')
        parser.add_argument('--to', required=True, help='Address that receives the test email')
        parser.add_argument('--token', required=True, help='JWT access token of an operator')
        parser.add_argument('--endpoint', default=None, help='Test-send URL (defaults to WORKFLOW_TEST_ENDPOINT)')
        parser.add_argument('--first-name', default=None)
        parser.add_argument('--last-name', default=None)
        parser.add_argument('--member-email', default=None, help='Value for {{email}} in the template')
        parser.add_argument('--membership-type', default=None)

    def handle(self, *args, **options):
        test_data = {
            key: options[option]
            for key, option in (
                ('first_name', 'first_name'),
                ('last_name', 'last_name'),
                ('email', 'member_email'),
                ('membership_type', 'membership_type'),
            )
            if options[option] is not None
        }

        client = WorkflowTestSendClient(options['token'], endpoint=options['endpoint'])
        try:
            client.send(options['workflow'], options['to'], test_data)
        except Unauthenticated as e:
            raise CommandError(f"Not authenticated: {e}")
        except DeliveryFailure as e:
            raise CommandError(e.reason)

        self.stdout.write(self.style.SUCCESS(f"Test email for workflow {options['workflow']} sent to {options['to']}"))
