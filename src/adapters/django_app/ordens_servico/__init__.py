"""
App Django de Ordens de Serviço.

Models, repositórios, forms, views HTML, API JSON e admin do sistema
de manutenção.
"""
