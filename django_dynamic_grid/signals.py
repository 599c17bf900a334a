from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.dispatch import receiver

from .context import NavigationContext


@receiver(user_logged_in)
def init_navigation(sender, request, user, **kwargs):
    if request is not None and hasattr(request, 'session'):
        NavigationContext.init(request.session)


@receiver(user_logged_out)
def clear_navigation(sender, request, user, **kwargs):
    if request is not None and hasattr(request, 'session'):
        NavigationContext.clear(request.session)
