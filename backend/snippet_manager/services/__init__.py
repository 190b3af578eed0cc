# Services package init
"""
Snippet Manager Backend — Services Layer
==========================================

What:  Business logic between the routes (HTTP) and the external
       collaborators (datastore, auth provider, text-generation provider).
Why:   Routes handle HTTP; services handle queries, prompts and retries,
       and can be unit-tested with mocked sessions and providers.

Service Inventory:
    - SnippetService / SnippetServiceFactory: owner-scoped snippet queries
    - AIProvider (abstract) / GeminiProvider: one prompt → text completion
    - AIAssistService: description, explanation and tag prompts with retry
    - call_with_retry: bounded exponential backoff, never retries a 4xx
    - HostedAuthClient: token verification and account operations
"""
