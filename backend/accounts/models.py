from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Base user model.
    Accounts are provisioned by the GitHub OAuth layer, which fills
    `github_id` and `avatar_url`; local passwords are optional.
    """
    github_id = models.CharField(max_length=64, unique=True, null=True, blank=True)
    avatar_url = models.URLField(max_length=500, blank=True, default='')

    @property
    def display_name(self) -> str:
        full = self.get_full_name()
        return full or self.username

    def __str__(self):
        return self.username
