import click


class Tags(click.ParamType):
    """Comma separated deployment tags, e.g. 'Merchant,Token'."""

    name = "tags"

    def convert(self, value, param, ctx):
        if isinstance(value, (list, tuple)):
            return list(value)
        tags = [tag.strip() for tag in str(value).split(",")]
        tags = [tag for tag in tags if tag]
        if not tags:
            self.fail(f"'{value}' does not contain any deployment tag", param, ctx)
        return tags
