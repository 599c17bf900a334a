from django.db import models


class ColumnType(models.TextChoices):
    TEXT = 'TEXT', 'Text'
    NUMBER = 'NUMBER', 'Number'


class FilterOperator(models.TextChoices):
    CONTAINS = 'contains', 'contains'
    NOT_CONTAINS = 'not_contains', 'does not contain'
    EQUALS = 'equals', 'is'
    IS_EMPTY = 'is_empty', 'is empty'
    IS_NOT_EMPTY = 'is_not_empty', 'is not empty'
    GREATER_THAN = 'gt', '>'
    LESS_THAN = 'lt', '<'


class SortDirection(models.TextChoices):
    ASC = 'ASC', 'A → Z'
    DESC = 'DESC', 'Z → A'
