"""
Snippet Manager Backend — Validators Package
==============================================

Entry points that turn untyped request input (a decoded JSON body, a query
dict, a path segment) into a `ValidationResult`:

    result.success → result.data holds the typed, normalized model
    else           → result.error holds {"errors": [{field, message}, ...]}

Routes call these explicitly, after the auth guard and before any service
call, and raise `ValidationError` on failure via `ValidationResult.unwrap()`.
"""
