import simplejson


def dumps(*args, **kwargs):
    kwargs["sort_keys"] = kwargs.get("sort_keys", True)
    return simplejson.dumps(*args, **kwargs)
