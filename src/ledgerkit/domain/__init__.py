"""Domain layer for ledgerkit application.

Services are imported from their own modules (``ledgerkit.domain.balances``
and so on); the package itself stays import-free so that the store layer can
load ``ledgerkit.domain.entities`` without pulling in the services.
"""
