"""Emails sent at each step of a source's lifecycle."""

from science_sources.mail.mailer import Mailer
from science_sources.sources.links import LinkBuilder
from science_sources.sources.record import Source

CONFIRMATION_SUBJECT = "Please confirm your email address"
CONFIRMATION_BODY = """\
Thank you for submitting yourself to {site_name}!

Please click this link to confirm your email address:
{confirmation_link}
"""

MODERATION_SUBJECT = "Please moderate new submission from {name}"
MODERATION_BODY = """\
Please moderate this new submission:
{content}

Publish it: {publish_link}

Trash it: {trash_link}
"""

PUBLISHED_SUBJECT = "You are now listed"
PUBLISHED_BODY = """\
Thank you for submitting yourself to {site_name}.

Your listing is now live:
{permalink}

To edit your listing at any time in the future, please visit:
{edit_link}

Keep this email for your records.

If you have any questions, please contact me:
{contact_url}
"""


class SourceEmails:
    """Composes lifecycle emails and hands them to the mailer."""

    def __init__(
        self,
        mailer: Mailer,
        links: LinkBuilder,
        site_name: str,
        admin_email: str,
    ) -> None:
        self._mailer = mailer
        self._links = links
        self._site_name = site_name
        self._admin_email = admin_email

    async def send_confirmation(self, source: Source) -> bool:
        """Ask the submitter to confirm their email address."""
        body = CONFIRMATION_BODY.format(
            site_name=self._site_name,
            confirmation_link=await self._links.confirmation_link(source),
        )
        return await self._mailer.send(source.email, CONFIRMATION_SUBJECT, body)

    async def send_moderation_request(self, source: Source) -> bool:
        """Ask the operator to publish or trash a confirmed submission."""
        subject = MODERATION_SUBJECT.format(name=source.name)
        body = MODERATION_BODY.format(
            content=source.content,
            publish_link=await self._links.admin_publish_link(source),
            trash_link=await self._links.admin_trash_link(source),
        )
        return await self._mailer.send(self._admin_email, subject, body)

    async def send_published(self, source: Source) -> bool:
        """Tell the submitter their listing is live and how to edit it."""
        body = PUBLISHED_BODY.format(
            site_name=self._site_name,
            permalink=self._links.permalink(source.id),
            edit_link=await self._links.edit_link(source),
            contact_url=self._links.contact_url(),
        )
        return await self._mailer.send(source.email, PUBLISHED_SUBJECT, body)
