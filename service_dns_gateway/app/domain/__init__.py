"""
Gateway domain: routes, validation, dispatch and the request pipeline.
"""
