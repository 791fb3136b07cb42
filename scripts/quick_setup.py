#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria cadastros de exemplo (opcional): coordenação, setores e
   setores responsáveis

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Adicionar raiz do projeto ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SETORES = ['UTI', 'Centro Cirúrgico', 'Recepção', 'Farmácia', 'Laboratório']

SETORES_RESPONSAVEIS = [
    ('Manutenção Elétrica', 'Instalações elétricas, tomadas e iluminação'),
    ('Manutenção Hidráulica', 'Vazamentos, torneiras e encanamento'),
    ('Engenharia Clínica', 'Equipamentos médico-hospitalares'),
]


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # Sem DATABASE_HOST o settings usa SQLite
    os.environ.pop('DATABASE_URL', None)
    os.environ.pop('DATABASE_HOST', None)

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


def create_sample_data(username: str, password: str):
    """Cria usuário da coordenação e cadastros básicos."""
    from django.contrib.auth import get_user_model

    from src.config.container import get_container
    from src.core.acesso import Ator, UserRole
    from src.core.cadastros.dtos import SalvarSetorInputDTO, SalvarSetorResponsavelInputDTO
    from src.core.shared.exceptions import ValidationError

    User = get_user_model()
    user = User.objects.filter(username=username).first()
    if user is None:
        # Superusuário recebe perfil de coordenação (signal)
        user = User.objects.create_superuser(
            username=username,
            email=f'{username}@localhost',
            password=password,
            first_name='Coordenação',
        )
        print(f"👤 Usuário '{username}' criado (coordenação)")

    ator = Ator(usuario_id=str(user.pk), papel=UserRole.COORDENACAO)
    container = get_container()

    print("📝 Criando setores...")
    for nome in SETORES:
        try:
            container.criar_setor_service().execute(SalvarSetorInputDTO(nome=nome), ator)
            print(f"   ✓ {nome}")
        except ValidationError:
            print(f"   - {nome} (já existe)")

    print("📝 Criando setores responsáveis...")
    for nome, descricao in SETORES_RESPONSAVEIS:
        try:
            container.criar_setor_responsavel_service().execute(
                SalvarSetorResponsavelInputDTO(nome=nome, descricao=descricao), ator
            )
            print(f"   ✓ {nome}")
        except ValidationError:
            print(f"   - {nome} (já existe)")

    print("✅ Dados de exemplo criados!")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except Exception as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python manage.py runserver")
    print("   2. Acesse: http://localhost:8000/")
    print("   3. Admin: http://localhost:8000/admin/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar coordenação, setores e setores responsáveis de exemplo'
    )
    parser.add_argument('--username', default='coordenacao')
    parser.add_argument('--password', default='coordenacao123')
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Ordens de Serviço - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está acessível.")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data(args.username, args.password)

    show_info()


if __name__ == '__main__':
    main()
