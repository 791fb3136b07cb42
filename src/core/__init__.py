"""
Core Domain Layer - O Hexágono.

Lógica de negócio das Ordens de Serviço de manutenção, sem dependências
de frameworks:
- shared: exceções, eventos e interfaces comuns
- acesso: papéis (solicitante, técnico, coordenação) e permissões
- ordens_servico: O.S., histórico de atualizações e SLA
- cadastros: setores, setores responsáveis e perfis
- notificacoes: notificações por usuário
- relatorios: indicadores e relatórios da coordenação
"""
